from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class TimeSlotBase(BaseModel):
    day_of_week: int = Field(ge=1, le=7)
    period_number: int = Field(ge=1)
    start_time: str = Field(pattern=HHMM_PATTERN)
    end_time: str = Field(pattern=HHMM_PATTERN)
    slot_type: str = "regular"


class TimeSlotCreate(TimeSlotBase):
    pass


class TimeSlotUpdate(BaseModel):
    day_of_week: int | None = Field(default=None, ge=1, le=7)
    period_number: int | None = Field(default=None, ge=1)
    start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    end_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    slot_type: str | None = None


class TimeSlotOut(TimeSlotBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
