from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel, Field


StudentStatus = Literal["active", "inactive", "graduated", "transferred"]


class StudentBase(BaseModel):
    admission_no: str = Field(min_length=1, max_length=50)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    dob: dt.date | None = None
    gender: str | None = None
    status: StudentStatus = "active"
    section_id: uuid.UUID | None = None


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    admission_no: str | None = Field(default=None, min_length=1, max_length=50)
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    dob: dt.date | None = None
    gender: str | None = None
    status: StudentStatus | None = None
    section_id: uuid.UUID | None = None


class StudentOut(StudentBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True
