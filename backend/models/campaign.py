from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    name = Column(Text, nullable=False)
    template_id = Column(Uuid, ForeignKey("message_templates.id", ondelete="SET NULL"), nullable=True)
    # Raw JSON text, e.g. {"type": "class", "class_id": "..."}
    audience_query = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="draft")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    template = relationship("Template")
    messages = relationship("Message", back_populates="campaign", cascade="all, delete-orphan")
