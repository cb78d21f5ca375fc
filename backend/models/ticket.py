from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    subject = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(30), nullable=False, default="general")
    priority = Column(String(20), nullable=False, default="normal")
    status = Column(String(20), nullable=False, default="open")
    created_by = Column(Text, nullable=True)
    assigned_to = Column(Text, nullable=True)
    sla_due_at = Column(DateTime(timezone=True), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    messages = relationship(
        "TicketMessage",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="TicketMessage.created_at",
    )


class TicketMessage(Base):
    __tablename__ = "ticket_messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    ticket_id = Column(Uuid, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    author = Column(Text, nullable=True)
    body = Column(Text, nullable=False)
    is_staff = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    ticket = relationship("Ticket", back_populates="messages")
