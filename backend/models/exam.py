from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Exam(Base):
    __tablename__ = "exams"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    name = Column(Text, nullable=False)
    exam_type = Column(String(30), nullable=True)
    academic_year_id = Column(Uuid, ForeignKey("academic_years.id"), nullable=True, index=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="SCHEDULED")
    max_marks = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    marks = relationship("Mark", cascade="all, delete-orphan")
