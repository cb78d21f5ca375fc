from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, DateTime, String, Text, Uuid
from sqlalchemy.sql import func

from models.base import Base


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    phone = Column(String(30), nullable=True)
    designation = Column(Text, nullable=True)
    department = Column(Text, nullable=True)
    employment_type = Column(String(30), nullable=True)
    join_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
