from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class SubjectBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1)
    credits: int = Field(default=1, ge=0)
    is_elective: bool = False
    description: str | None = None


class SubjectCreate(SubjectBase):
    pass


class SubjectUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1)
    credits: int | None = Field(default=None, ge=0)
    is_elective: bool | None = None
    description: str | None = None


class SubjectOut(SubjectBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
