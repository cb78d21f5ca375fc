from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel, Field


Recurrence = Literal["monthly", "quarterly", "halfYearly", "annual"]
ScheduleStatus = Literal["active", "paused"]
InvoiceStatus = Literal["draft", "issued", "partial", "paid", "overdue", "cancelled"]
PaymentStatus = Literal["success", "pending", "failed"]


class FeeComponentIn(BaseModel):
    name: str = Field(min_length=1)
    amount: float = Field(ge=0)


class FeeComponentOut(FeeComponentIn):
    id: uuid.UUID

    class Config:
        from_attributes = True


class FeeStructureBase(BaseModel):
    name: str = Field(min_length=1)
    class_id: uuid.UUID | None = None


class FeeStructureCreate(FeeStructureBase):
    components: list[FeeComponentIn] = Field(default_factory=list)


class FeeStructureUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    class_id: uuid.UUID | None = None
    components: list[FeeComponentIn] | None = None


class FeeStructureOut(FeeStructureBase):
    id: uuid.UUID
    branch_id: str | None = None
    components: list[FeeComponentOut]
    total: float
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class FeeScheduleBase(BaseModel):
    fee_structure_id: uuid.UUID
    recurrence: Recurrence = "monthly"
    due_day_of_month: int = Field(default=10, ge=1, le=28)
    status: ScheduleStatus = "active"


class FeeScheduleCreate(FeeScheduleBase):
    pass


class FeeScheduleUpdate(BaseModel):
    fee_structure_id: uuid.UUID | None = None
    recurrence: Recurrence | None = None
    due_day_of_month: int | None = Field(default=None, ge=1, le=28)
    status: ScheduleStatus | None = None


class FeeScheduleOut(FeeScheduleBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class GenerateInvoicesResult(BaseModel):
    schedule_id: uuid.UUID
    period: str
    created: int
    skipped: int


class InvoiceBase(BaseModel):
    student_id: uuid.UUID
    fee_structure_id: uuid.UUID | None = None
    period: str = Field(min_length=1, max_length=20)
    due_date: dt.date | None = None
    amount: float = Field(ge=0)
    status: InvoiceStatus = "draft"


class InvoiceCreate(InvoiceBase):
    pass


class InvoiceUpdate(BaseModel):
    student_id: uuid.UUID | None = None
    fee_structure_id: uuid.UUID | None = None
    period: str | None = Field(default=None, min_length=1, max_length=20)
    due_date: dt.date | None = None
    amount: float | None = Field(default=None, ge=0)
    status: InvoiceStatus | None = None


class InvoiceOut(InvoiceBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class PaymentBase(BaseModel):
    invoice_id: uuid.UUID
    amount: float = Field(gt=0)
    method: str | None = None
    gateway: str | None = None
    reference: str | None = None
    status: PaymentStatus = "success"


class PaymentCreate(PaymentBase):
    pass


class PaymentUpdate(BaseModel):
    method: str | None = None
    gateway: str | None = None
    reference: str | None = None
    status: PaymentStatus | None = None


class PaymentOut(PaymentBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True
