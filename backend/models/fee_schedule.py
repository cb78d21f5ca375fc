from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


RECURRENCES = ("monthly", "quarterly", "halfYearly", "annual")


class FeeSchedule(Base):
    __tablename__ = "fee_schedules"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    fee_structure_id = Column(Uuid, ForeignKey("fee_structures.id", ondelete="CASCADE"), nullable=False)
    recurrence = Column(String(20), nullable=False, default="monthly")
    due_day_of_month = Column(Integer, nullable=False, default=10)
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    fee_structure = relationship("FeeStructure")

    __table_args__ = (
        CheckConstraint("due_day_of_month >= 1 and due_day_of_month <= 28", name="ck_fee_schedules_due_day"),
    )
