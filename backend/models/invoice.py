from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    fee_structure_id = Column(Uuid, ForeignKey("fee_structures.id", ondelete="SET NULL"), nullable=True)
    period = Column(String(20), nullable=False)
    due_date = Column(Date, nullable=True)
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    status = Column(String(20), nullable=False, default="draft")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    student = relationship("Student", back_populates="invoices")
    payments = relationship("Payment", back_populates="invoice", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_invoices_amount"),
        UniqueConstraint("student_id", "period", "fee_structure_id", name="uq_invoices_student_period_structure"),
    )
