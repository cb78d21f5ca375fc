from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from models.base import Base


class TimeSlot(Base):
    __tablename__ = "time_slots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    day_of_week = Column(Integer, nullable=False)
    period_number = Column(Integer, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    slot_type = Column(String(20), nullable=False, default="regular")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("day_of_week >= 1 and day_of_week <= 7", name="ck_time_slots_day"),
        CheckConstraint("period_number >= 1", name="ck_time_slots_period_number"),
        UniqueConstraint("branch_id", "day_of_week", "period_number", name="uq_time_slots_branch_day_period"),
    )
