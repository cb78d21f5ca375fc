from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


RoomType = Literal["classroom", "lab", "library", "auditorium", "sports", "other"]


class RoomBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1)
    building: str | None = None
    floor: str | None = None
    type: RoomType = "classroom"
    capacity: int = Field(default=0, ge=0)
    facilities: str | None = None
    is_active: bool = True


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1)
    building: str | None = None
    floor: str | None = None
    type: RoomType | None = None
    capacity: int | None = Field(default=None, ge=0)
    facilities: str | None = None
    is_active: bool | None = None


class RoomOut(RoomBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
