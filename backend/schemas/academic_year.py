from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, Field, model_validator


class AcademicYearBase(BaseModel):
    name: str = Field(min_length=1)
    start_date: dt.date
    end_date: dt.date
    is_active: bool = True

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class AcademicYearCreate(AcademicYearBase):
    pass


class AcademicYearUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    is_active: bool | None = None


class AcademicYearOut(BaseModel):
    id: uuid.UUID
    branch_id: str | None = None
    name: str
    start_date: dt.date
    end_date: dt.date
    is_active: bool
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True
