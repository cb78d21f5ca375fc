from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class FeeStructure(Base):
    __tablename__ = "fee_structures"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    name = Column(Text, nullable=False)
    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    components = relationship(
        "FeeComponent",
        back_populates="fee_structure",
        cascade="all, delete-orphan",
        order_by="FeeComponent.position",
        lazy="selectin",
    )

    @property
    def total(self) -> float:
        return round(sum(float(c.amount or 0) for c in self.components), 2)


class FeeComponent(Base):
    __tablename__ = "fee_components"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    fee_structure_id = Column(Uuid, ForeignKey("fee_structures.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    fee_structure = relationship("FeeStructure", back_populates="components")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_fee_components_amount"),
    )
