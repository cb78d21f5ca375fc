from __future__ import annotations

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from models.base import Base


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    code = Column(String(50), nullable=False)
    name = Column(Text, nullable=False)
    credits = Column(Integer, nullable=False, default=1)
    is_elective = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("credits >= 0", name="ck_subjects_credits"),
        UniqueConstraint("branch_id", "code", name="uq_subjects_branch_code"),
    )
