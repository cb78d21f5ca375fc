from __future__ import annotations

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from models.base import Base


ROOM_TYPES = ("classroom", "lab", "library", "auditorium", "sports", "other")


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    code = Column(String(50), nullable=False)
    name = Column(Text, nullable=False)
    building = Column(Text, nullable=True)
    floor = Column(String(20), nullable=True)
    type = Column(String(20), nullable=False, default="classroom")
    capacity = Column(Integer, nullable=False, default=0)
    facilities = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("capacity >= 0", name="ck_rooms_capacity"),
        UniqueConstraint("branch_id", "code", name="uq_rooms_branch_code"),
    )
