from __future__ import annotations

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, String, Text, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from models.base import Base


class AcademicYear(Base):
    __tablename__ = "academic_years"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    name = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_academic_years_range"),
        UniqueConstraint("branch_id", "name", name="uq_academic_years_branch_name"),
    )
