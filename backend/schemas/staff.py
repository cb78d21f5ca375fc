from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, Field


class StaffBase(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None
    designation: str | None = None
    department: str | None = None
    employment_type: str | None = None
    join_date: dt.date | None = None
    status: str = "active"


class StaffCreate(StaffBase):
    pass


class StaffUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    phone: str | None = None
    designation: str | None = None
    department: str | None = None
    employment_type: str | None = None
    join_date: dt.date | None = None
    status: str | None = None


class StaffOut(StaffBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True
