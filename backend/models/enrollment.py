from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    section_id = Column(Uuid, ForeignKey("sections.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="active")
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    student = relationship("Student", back_populates="enrollments")
