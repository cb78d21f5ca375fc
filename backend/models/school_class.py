from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class SchoolClass(Base):
    """A grade level offered by a branch ("Nursery", "Class 8", ...)."""

    __tablename__ = "classes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    name = Column(Text, nullable=False)
    grade_level = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    sections = relationship("Section", back_populates="school_class")

    __table_args__ = (
        CheckConstraint(
            "grade_level is null or (grade_level >= 0 and grade_level <= 14)",
            name="ck_classes_grade_level_range",
        ),
    )
