from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from models.base import Base


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    section_id = Column(Uuid, ForeignKey("sections.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="present")
    reason = Column(Text, nullable=True)
    marked_by = Column(Text, nullable=True)
    source = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("student_id", "date", name="uq_attendance_records_student_date"),
    )
