from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel, Field


ApplicationStatus = Literal["SUBMITTED", "UNDER_REVIEW", "APPROVED", "REJECTED", "WAITLISTED"]


class ApplicationBase(BaseModel):
    applicant_first_name: str = Field(min_length=1)
    applicant_last_name: str = Field(min_length=1)
    dob: dt.date | None = None
    gender: str | None = None
    grade_applied: str = Field(min_length=1)
    guardian_name: str | None = None
    guardian_email: str | None = None
    guardian_phone: str | None = None
    previous_school: str | None = None
    notes: str | None = None
    status: ApplicationStatus = "SUBMITTED"


class ApplicationCreate(ApplicationBase):
    application_no: str | None = Field(default=None, min_length=1, max_length=30)


class ApplicationUpdate(BaseModel):
    application_no: str | None = Field(default=None, min_length=1, max_length=30)
    applicant_first_name: str | None = Field(default=None, min_length=1)
    applicant_last_name: str | None = Field(default=None, min_length=1)
    dob: dt.date | None = None
    gender: str | None = None
    grade_applied: str | None = Field(default=None, min_length=1)
    guardian_name: str | None = None
    guardian_email: str | None = None
    guardian_phone: str | None = None
    previous_school: str | None = None
    notes: str | None = None
    status: ApplicationStatus | None = None


class ApplicationOut(ApplicationBase):
    id: uuid.UUID
    branch_id: str | None = None
    application_no: str
    reviewed_at: dt.datetime | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True
