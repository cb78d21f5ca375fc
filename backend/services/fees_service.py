from __future__ import annotations

import datetime as dt
import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.tenant import get_by_id, where_branch
from models.fee_schedule import FeeSchedule
from models.fee_structure import FeeComponent, FeeStructure
from models.invoice import Invoice
from models.payment import Payment
from models.school_class import SchoolClass
from models.section import Section
from models.student import Student
from services.crud import CrudService


logger = logging.getLogger(__name__)


class FeeStructureService(CrudService):
    model = FeeStructure
    resource = "FEE_STRUCTURE"
    search_fields = ("name",)
    default_sort = "name"
    references = {"class_id": SchoolClass}

    @staticmethod
    def _components(items: list[dict[str, Any]]) -> list[FeeComponent]:
        return [FeeComponent(name=c["name"], amount=float(c["amount"]), position=i) for i, c in enumerate(items)]

    def create(self, db: Session, data: dict[str, Any]):
        data = dict(data)
        components = data.pop("components", None) or []
        data.pop("branch_id", None)
        self.check_references(db, data)
        structure = FeeStructure(**data)
        structure.components = self._components(components)
        db.add(structure)
        self.commit(db)
        db.refresh(structure)
        return structure

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        components = data.pop("components", None)
        if components is not None:
            # Replaced wholesale; delete-orphan removes the old rows.
            obj.components = self._components(components)
        return data


class FeeScheduleService(CrudService):
    model = FeeSchedule
    resource = "FEE_SCHEDULE"
    default_sort = "-created_at"
    references = {"fee_structure_id": FeeStructure}

    @staticmethod
    def billing_period(due_day_of_month: int, today: dt.date) -> tuple[str, dt.date]:
        """Label (YYYY-MM) and due date for the cycle containing `today`."""

        return f"{today.year:04d}-{today.month:02d}", dt.date(today.year, today.month, int(due_day_of_month))

    def generate(self, db: Session, schedule_id, *, today: dt.date | None = None) -> dict[str, Any]:
        schedule = self.get_one(db, schedule_id)
        today = today or dt.date.today()
        period, due_date = self.billing_period(schedule.due_day_of_month, today)

        if schedule.status == "paused":
            return {"schedule_id": schedule.id, "period": period, "created": 0, "skipped": 0}

        structure = get_by_id(db, FeeStructure, schedule.fee_structure_id, self.branch_id)
        if structure is None:
            raise HTTPException(status_code=404, detail="FEE_STRUCTURE_NOT_FOUND")
        amount = structure.total

        students_q = select(Student.id).where(Student.status == "active")
        if structure.class_id is not None:
            students_q = students_q.join(Section, Section.id == Student.section_id).where(
                Section.class_id == structure.class_id
            )
        student_ids = db.execute(where_branch(students_q, Student, self.branch_id)).scalars().all()

        existing_q = select(Invoice.student_id).where(
            Invoice.period == period,
            Invoice.fee_structure_id == structure.id,
        )
        already = set(db.execute(where_branch(existing_q, Invoice, self.branch_id)).scalars().all())

        created = 0
        for student_id in student_ids:
            if student_id in already:
                continue
            db.add(
                Invoice(
                    student_id=student_id,
                    fee_structure_id=structure.id,
                    period=period,
                    due_date=due_date,
                    amount=amount,
                    status="issued",
                )
            )
            created += 1
        self.commit(db, code="INVOICE_CONFLICT")

        logger.info("Generated %s invoices for schedule %s period %s", created, schedule.id, period)
        return {
            "schedule_id": schedule.id,
            "period": period,
            "created": created,
            "skipped": len(student_ids) - created,
        }


class InvoiceService(CrudService):
    model = Invoice
    resource = "INVOICE"
    search_fields = ("period", "status")
    default_sort = "-due_date"
    references = {"student_id": Student, "fee_structure_id": FeeStructure}


def recompute_invoice_status(db: Session, invoice: Invoice) -> str:
    paid = db.execute(
        select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.invoice_id == invoice.id,
            Payment.status == "success",
        )
    ).scalar_one()
    paid = float(paid or 0)
    if paid >= float(invoice.amount) and paid > 0:
        invoice.status = "paid"
    elif paid > 0:
        invoice.status = "partial"
    elif invoice.status in ("partial", "paid"):
        # Every successful payment was reversed.
        invoice.status = "issued"
    return invoice.status


class PaymentService(CrudService):
    model = Payment
    resource = "PAYMENT"
    search_fields = ("reference", "method", "gateway")
    default_sort = "-created_at"
    references = {"invoice_id": Invoice}

    def create(self, db: Session, data: dict[str, Any]):
        data = dict(data)
        data.pop("branch_id", None)
        self.check_references(db, data)
        invoice = get_by_id(db, Invoice, data["invoice_id"], self.branch_id)
        if invoice.status == "cancelled":
            raise HTTPException(
                status_code=400,
                detail={"code": "INVOICE_CANCELLED", "message": "Cannot pay a cancelled invoice"},
            )

        payment = Payment(**data)
        # Payment insert and invoice status change commit together or not at all.
        try:
            db.add(payment)
            db.flush()
            recompute_invoice_status(db, invoice)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(status_code=409, detail="PAYMENT_CONFLICT")
        except Exception:
            db.rollback()
            raise
        db.refresh(payment)
        return payment

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        if data.get("status", obj.status) is None:
            data.pop("status")
        if "status" in data and data["status"] != obj.status:
            obj.status = data.pop("status")
            db.flush()
            recompute_invoice_status(db, obj.invoice)
        return data

    def after_delete(self, db: Session, obj) -> None:
        db.flush()
        invoice = get_by_id(db, Invoice, obj.invoice_id, self.branch_id)
        if invoice is not None:
            recompute_invoice_status(db, invoice)


fee_structure_service = FeeStructureService()
fee_schedule_service = FeeScheduleService()
invoice_service = InvoiceService()
payment_service = PaymentService()
