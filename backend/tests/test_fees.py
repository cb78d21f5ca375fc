import datetime as dt

from core.tenancy import scope_context
from services.fees_service import FeeScheduleService, fee_schedule_service


def _student(north, no: str, **extra) -> dict:
    return north.create("/students", {"admission_no": no, "first_name": "Student", "last_name": no, **extra})


def test_structure_total_is_sum_of_components(north):
    structure = north.create(
        "/fees/structures",
        {"name": "Tuition", "components": [{"name": "Tuition", "amount": 800}, {"name": "Lab", "amount": 200.5}]},
    )
    assert structure["total"] == 1000.5
    assert [c["name"] for c in structure["components"]] == ["Tuition", "Lab"]

    res = north.patch(f"/fees/structures/{structure['id']}", json={"components": [{"name": "Flat", "amount": 500}]})
    assert res.json()["data"]["total"] == 500
    assert len(res.json()["data"]["components"]) == 1


def test_billing_period():
    assert FeeScheduleService.billing_period(10, dt.date(2024, 9, 25)) == ("2024-09", dt.date(2024, 9, 10))


def test_generate_invoices(north, db):
    _student(north, "A-1")
    _student(north, "A-2")
    _student(north, "A-3", status="inactive")
    structure = north.create("/fees/structures", {"name": "Tuition", "components": [{"name": "Tuition", "amount": 1200}]})
    schedule = north.create("/fees/schedules", {"fee_structure_id": structure["id"], "due_day_of_month": 5})

    with scope_context(branch_id="north"):
        result = fee_schedule_service.generate(db, schedule["id"], today=dt.date(2024, 9, 1))
    assert result["period"] == "2024-09"
    assert result["created"] == 2

    invoices = north.get("/fees/invoices").json()["data"]
    assert {i["status"] for i in invoices} == {"issued"}
    assert {i["amount"] for i in invoices} == {1200}
    assert {i["due_date"] for i in invoices} == {"2024-09-05"}

    # Second run in the same period skips students already invoiced.
    with scope_context(branch_id="north"):
        again = fee_schedule_service.generate(db, schedule["id"], today=dt.date(2024, 9, 20))
    assert again["created"] == 0
    assert again["skipped"] == 2


def test_generate_over_http_and_paused(north):
    _student(north, "A-1")
    structure = north.create("/fees/structures", {"name": "Tuition", "components": [{"name": "Tuition", "amount": 100}]})
    schedule = north.create("/fees/schedules", {"fee_structure_id": structure["id"], "status": "paused"})

    res = north.post(f"/fees/schedules/{schedule['id']}/generate")
    assert res.status_code == 200
    assert res.json()["created"] == 0

    north.patch(f"/fees/schedules/{schedule['id']}", json={"status": "active"})
    assert north.post(f"/fees/schedules/{schedule['id']}/generate").json()["created"] == 1


def test_class_structure_only_bills_that_class(north):
    grade1 = north.create("/classes", {"name": "Class 1"})
    grade2 = north.create("/classes", {"name": "Class 2"})
    s1 = north.create("/sections", {"class_id": grade1["id"], "name": "A"})
    s2 = north.create("/sections", {"class_id": grade2["id"], "name": "A"})
    _student(north, "A-1", section_id=s1["id"])
    _student(north, "A-2", section_id=s2["id"])
    structure = north.create(
        "/fees/structures",
        {"name": "Class 1 fees", "class_id": grade1["id"], "components": [{"name": "Tuition", "amount": 100}]},
    )
    schedule = north.create("/fees/schedules", {"fee_structure_id": structure["id"]})

    assert north.post(f"/fees/schedules/{schedule['id']}/generate").json()["created"] == 1


def test_payments_update_invoice_status(north):
    student = _student(north, "A-1")
    invoice = north.create(
        "/fees/invoices", {"student_id": student["id"], "period": "2024-09", "amount": 1000, "status": "issued"}
    )

    north.create("/fees/payments", {"invoice_id": invoice["id"], "amount": 400, "method": "upi"})
    assert north.get(f"/fees/invoices/{invoice['id']}").json()["data"]["status"] == "partial"

    # Pending payments do not count.
    pending = north.create("/fees/payments", {"invoice_id": invoice["id"], "amount": 600, "status": "pending"})
    assert north.get(f"/fees/invoices/{invoice['id']}").json()["data"]["status"] == "partial"

    north.patch(f"/fees/payments/{pending['id']}", json={"status": "success"})
    assert north.get(f"/fees/invoices/{invoice['id']}").json()["data"]["status"] == "paid"


def test_cannot_pay_cancelled_invoice(north):
    student = _student(north, "A-1")
    invoice = north.create(
        "/fees/invoices", {"student_id": student["id"], "period": "2024-09", "amount": 10, "status": "cancelled"}
    )
    res = north.post("/fees/payments", json={"invoice_id": invoice["id"], "amount": 10})
    assert res.status_code == 400
    assert res.json()["code"] == "INVOICE_CANCELLED"
    assert north.get("/fees/payments").json()["total"] == 0


def test_payment_amount_must_be_positive(north):
    student = _student(north, "A-1")
    invoice = north.create("/fees/invoices", {"student_id": student["id"], "period": "2024-09", "amount": 10})
    assert north.post("/fees/payments", json={"invoice_id": invoice["id"], "amount": 0}).status_code == 422


def _paid_invoice(north) -> tuple[dict, dict]:
    student = _student(north, "P-1")
    invoice = north.create("/fees/invoices", {"student_id": student["id"], "period": "2024-09", "amount": 100})
    payment = north.create("/fees/payments", {"invoice_id": invoice["id"], "amount": 100})
    assert north.get(f"/fees/invoices/{invoice['id']}").json()["data"]["status"] == "paid"
    return invoice, payment


def test_deleting_payment_reopens_invoice(north):
    invoice, payment = _paid_invoice(north)

    assert north.delete(f"/fees/payments/{payment['id']}").status_code == 200
    assert north.get(f"/fees/invoices/{invoice['id']}").json()["data"]["status"] == "issued"


def test_bulk_payment_delete_recomputes_invoice(north):
    invoice, payment = _paid_invoice(north)

    res = north.delete("/fees/payments", params={"ids": payment["id"]})
    assert res.json()["data"] == [payment["id"]]
    assert north.get(f"/fees/invoices/{invoice['id']}").json()["data"]["status"] == "issued"


def test_bulk_payment_failure_recomputes_invoice(north):
    invoice, payment = _paid_invoice(north)

    res = north.patch("/fees/payments", json={"ids": [payment["id"]], "data": {"status": "failed"}})
    assert res.status_code == 200
    assert north.get(f"/fees/invoices/{invoice['id']}").json()["data"]["status"] == "issued"
