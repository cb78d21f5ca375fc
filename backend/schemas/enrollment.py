from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel


EnrollmentStatus = Literal["active", "completed", "withdrawn"]


class EnrollmentBase(BaseModel):
    student_id: uuid.UUID
    section_id: uuid.UUID
    status: EnrollmentStatus = "active"
    start_date: dt.date | None = None
    end_date: dt.date | None = None


class EnrollmentCreate(EnrollmentBase):
    pass


class EnrollmentUpdate(BaseModel):
    student_id: uuid.UUID | None = None
    section_id: uuid.UUID | None = None
    status: EnrollmentStatus | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None


class EnrollmentOut(EnrollmentBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True
