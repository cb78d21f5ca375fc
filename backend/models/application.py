from __future__ import annotations

import uuid

from sqlalchemy import Column, Date, DateTime, String, Text, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from models.base import Base


class Application(Base):
    """Admission application. `application_no` looks like APP20250001."""

    __tablename__ = "applications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    application_no = Column(String(30), nullable=False)
    applicant_first_name = Column(Text, nullable=False)
    applicant_last_name = Column(Text, nullable=False)
    dob = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    grade_applied = Column(Text, nullable=False)
    guardian_name = Column(Text, nullable=True)
    guardian_email = Column(Text, nullable=True)
    guardian_phone = Column(String(30), nullable=True)
    previous_school = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="SUBMITTED")
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("branch_id", "application_no", name="uq_applications_branch_no"),
    )
