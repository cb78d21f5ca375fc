from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class BranchBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1)
    address: str | None = None


class BranchCreate(BranchBase):
    id: str = Field(min_length=1, max_length=64)


class BranchPut(BranchBase):
    pass


class BranchUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1)
    address: str | None = None


class BranchOut(BranchBase):
    id: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
