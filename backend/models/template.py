from __future__ import annotations

import uuid

from sqlalchemy import JSON, Column, DateTime, String, Text, Uuid
from sqlalchemy.sql import func

from models.base import Base


class Template(Base):
    __tablename__ = "message_templates"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    name = Column(Text, nullable=False)
    channel = Column(String(20), nullable=False, default="email")
    subject = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    variables = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
