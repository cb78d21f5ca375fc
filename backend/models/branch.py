from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from models.base import Base


class Branch(Base):
    """One school/campus. Its id is the value clients send in X-Branch-Id."""

    __tablename__ = "branches"

    id = Column(String(64), primary_key=True)
    code = Column(String(50), nullable=False, unique=True)
    name = Column(Text, nullable=False)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
