from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from models.base import Base


class Mark(Base):
    __tablename__ = "marks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    exam_id = Column(Uuid, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True)
    raw_marks = Column(Float, nullable=True)
    grade = Column(String(5), nullable=True)
    comments = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("exam_id", "student_id", "subject_id", name="uq_marks_exam_student_subject"),
        CheckConstraint("raw_marks is null or raw_marks >= 0", name="ck_marks_raw_marks_non_negative"),
    )
