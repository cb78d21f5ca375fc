from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.crud import register_crud_routes
from core.database import get_db
from schemas.fees import (
    FeeScheduleCreate,
    FeeScheduleOut,
    FeeScheduleUpdate,
    FeeStructureCreate,
    FeeStructureOut,
    FeeStructureUpdate,
    GenerateInvoicesResult,
    InvoiceCreate,
    InvoiceOut,
    InvoiceUpdate,
    PaymentCreate,
    PaymentOut,
    PaymentUpdate,
)
from services.fees_service import fee_schedule_service, fee_structure_service, invoice_service, payment_service


router = APIRouter()


structures = APIRouter()
register_crud_routes(
    structures,
    fee_structure_service,
    out_schema=FeeStructureOut,
    create_schema=FeeStructureCreate,
    update_schema=FeeStructureUpdate,
)


schedules = APIRouter()


@schedules.post("/{schedule_id}/generate", response_model=GenerateInvoicesResult)
def generate_invoices(schedule_id: str, db: Session = Depends(get_db)) -> GenerateInvoicesResult:
    return GenerateInvoicesResult(**fee_schedule_service.generate(db, schedule_id))


register_crud_routes(
    schedules,
    fee_schedule_service,
    out_schema=FeeScheduleOut,
    create_schema=FeeScheduleCreate,
    update_schema=FeeScheduleUpdate,
)


invoices = APIRouter()
register_crud_routes(
    invoices,
    invoice_service,
    out_schema=InvoiceOut,
    create_schema=InvoiceCreate,
    update_schema=InvoiceUpdate,
)


payments = APIRouter()
register_crud_routes(
    payments,
    payment_service,
    out_schema=PaymentOut,
    create_schema=PaymentCreate,
    update_schema=PaymentUpdate,
    put_schema=PaymentUpdate,
)


router.include_router(structures, prefix="/structures")
router.include_router(schedules, prefix="/schedules")
router.include_router(invoices, prefix="/invoices")
router.include_router(payments, prefix="/payments")
