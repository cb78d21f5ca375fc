from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    admission_no = Column(String(50), nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    dob = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    status = Column(String(20), nullable=False, default="active")
    section_id = Column(Uuid, ForeignKey("sections.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Deleting a student removes everything hanging off it.
    guardians = relationship(
        "Guardian", back_populates="student", cascade="all, delete-orphan", order_by="Guardian.created_at"
    )
    enrollments = relationship("Enrollment", back_populates="student", cascade="all, delete-orphan")
    invoices = relationship("Invoice", back_populates="student", cascade="all, delete-orphan")
    attendance_records = relationship("AttendanceRecord", cascade="all, delete-orphan")
    marks = relationship("Mark", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("branch_id", "admission_no", name="uq_students_branch_admission_no"),
    )
