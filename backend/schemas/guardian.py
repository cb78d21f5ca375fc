from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class GuardianBase(BaseModel):
    student_id: uuid.UUID
    relation: str | None = None
    name: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class GuardianCreate(GuardianBase):
    pass


class GuardianUpdate(BaseModel):
    student_id: uuid.UUID | None = None
    relation: str | None = None
    name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class GuardianOut(GuardianBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
