from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class TeacherBase(BaseModel):
    staff_id: uuid.UUID
    subjects: str | None = None
    qualifications: str | None = None
    experience_years: int | None = Field(default=None, ge=0)


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(BaseModel):
    staff_id: uuid.UUID | None = None
    subjects: str | None = None
    qualifications: str | None = None
    experience_years: int | None = Field(default=None, ge=0)


class TeacherOut(TeacherBase):
    id: uuid.UUID
    branch_id: str | None = None
    display_name: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
