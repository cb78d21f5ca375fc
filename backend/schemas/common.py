from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel


T = TypeVar("T")


class ListResponse(BaseModel, Generic[T]):
    data: list[T]
    total: int


class ItemResponse(BaseModel, Generic[T]):
    data: T


class BulkResult(BaseModel):
    data: list[str]


class BulkUpdateRequest(BaseModel):
    ids: list[str]
    data: dict
