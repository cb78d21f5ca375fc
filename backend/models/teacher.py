from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    staff_id = Column(Uuid, ForeignKey("staff.id"), nullable=False, unique=True)
    subjects = Column(Text, nullable=True)
    qualifications = Column(Text, nullable=True)
    experience_years = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    staff = relationship("Staff", lazy="joined")

    __table_args__ = (
        CheckConstraint("experience_years is null or experience_years >= 0", name="ck_teachers_experience"),
    )

    @property
    def display_name(self) -> str:
        if self.staff is None:
            return str(self.id)
        return f"{self.staff.first_name} {self.staff.last_name}".strip()
