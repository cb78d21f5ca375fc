from __future__ import annotations

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Uuid, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class TimetablePeriod(Base):
    __tablename__ = "timetable_periods"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    section_id = Column(Uuid, ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    period_number = Column(Integer, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    subject_id = Column(Uuid, ForeignKey("subjects.id"), nullable=True)
    teacher_id = Column(Uuid, ForeignKey("teachers.id"), nullable=True, index=True)
    room_id = Column(Uuid, ForeignKey("rooms.id"), nullable=True, index=True)
    academic_year_id = Column(Uuid, ForeignKey("academic_years.id"), nullable=False)
    is_break = Column(Boolean, nullable=False, default=False)
    break_type = Column(String(30), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    section = relationship("Section")
    subject = relationship("Subject")
    teacher = relationship("Teacher")
    room = relationship("Room")
    substitutions = relationship("Substitution", back_populates="period", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("day_of_week >= 1 and day_of_week <= 7", name="ck_timetable_periods_day"),
        CheckConstraint("period_number >= 1", name="ck_timetable_periods_period_number"),
        Index(
            "ux_timetable_periods_section_slot",
            "section_id",
            "day_of_week",
            "period_number",
            "academic_year_id",
            unique=True,
            postgresql_where=text("is_break = false"),
            sqlite_where=text("is_break = 0"),
        ),
        Index("ix_timetable_periods_slot", "day_of_week", "period_number", "academic_year_id"),
    )
