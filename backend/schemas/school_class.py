from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class SchoolClassBase(BaseModel):
    name: str = Field(min_length=1)
    grade_level: int | None = Field(default=None, ge=0, le=14)


class SchoolClassCreate(SchoolClassBase):
    pass


class SchoolClassUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    grade_level: int | None = Field(default=None, ge=0, le=14)


class SchoolClassOut(SchoolClassBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
