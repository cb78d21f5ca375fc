from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel, Field


ExamStatus = Literal["SCHEDULED", "IN_PROGRESS", "COMPLETED", "CANCELLED"]


class ExamBase(BaseModel):
    name: str = Field(min_length=1)
    exam_type: str | None = None
    academic_year_id: uuid.UUID | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    status: ExamStatus = "SCHEDULED"
    max_marks: int | None = Field(default=None, ge=0)


class ExamCreate(ExamBase):
    pass


class ExamUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    exam_type: str | None = None
    academic_year_id: uuid.UUID | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    status: ExamStatus | None = None
    max_marks: int | None = Field(default=None, ge=0)


class ExamOut(ExamBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class MarkBase(BaseModel):
    exam_id: uuid.UUID
    student_id: uuid.UUID
    subject_id: uuid.UUID | None = None
    raw_marks: float | None = Field(default=None, ge=0)
    grade: str | None = Field(default=None, max_length=5)
    comments: str | None = None


class MarkCreate(MarkBase):
    pass


class MarkUpdate(BaseModel):
    subject_id: uuid.UUID | None = None
    raw_marks: float | None = Field(default=None, ge=0)
    grade: str | None = Field(default=None, max_length=5)
    comments: str | None = None


class MarkOut(MarkBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True
