from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Substitution(Base):
    __tablename__ = "substitutions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    period_id = Column(Uuid, ForeignKey("timetable_periods.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    substitute_teacher_id = Column(Uuid, ForeignKey("teachers.id"), nullable=True)
    substitute_room_id = Column(Uuid, ForeignKey("rooms.id"), nullable=True)
    reason = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    approved_by = Column(Text, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    period = relationship("TimetablePeriod", back_populates="substitutions")

    __table_args__ = (
        UniqueConstraint("period_id", "date", name="uq_substitutions_period_date"),
    )
