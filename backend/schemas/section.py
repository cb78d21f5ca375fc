from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class SectionBase(BaseModel):
    class_id: uuid.UUID
    name: str = Field(min_length=1)
    capacity: int | None = Field(default=None, ge=0)
    homeroom_teacher_id: uuid.UUID | None = None


class SectionCreate(SectionBase):
    pass


class SectionUpdate(BaseModel):
    class_id: uuid.UUID | None = None
    name: str | None = Field(default=None, min_length=1)
    capacity: int | None = Field(default=None, ge=0)
    homeroom_teacher_id: uuid.UUID | None = None


class SectionOut(SectionBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
