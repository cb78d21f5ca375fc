from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class TeacherAttendance(Base):
    __tablename__ = "teacher_attendance"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    teacher_id = Column(Uuid, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="present")
    check_in = Column(DateTime(timezone=True), nullable=True)
    check_out = Column(DateTime(timezone=True), nullable=True)
    total_hours = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    teacher = relationship("Teacher")

    __table_args__ = (
        UniqueConstraint("teacher_id", "date", name="uq_teacher_attendance_teacher_date"),
    )
