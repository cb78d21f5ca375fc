from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base


class Section(Base):
    __tablename__ = "sections"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    branch_id = Column(String(64), nullable=True, index=True)
    class_id = Column(Uuid, ForeignKey("classes.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    capacity = Column(Integer, nullable=True)
    homeroom_teacher_id = Column(Uuid, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    school_class = relationship("SchoolClass", back_populates="sections")

    __table_args__ = (
        CheckConstraint("capacity is null or capacity >= 0", name="ck_sections_capacity"),
    )
