from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    campaign_id = Column(Uuid, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=True, index=True)
    channel = Column(String(20), nullable=False, default="email")
    recipient = Column(Text, nullable=False)
    subject = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    campaign = relationship("Campaign", back_populates="messages")
