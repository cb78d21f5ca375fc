from __future__ import annotations

import datetime as dt
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.crud import register_crud_routes
from core.database import get_db
from schemas.attendance import (
    AttendanceRecordCreate,
    AttendanceRecordOut,
    AttendanceRecordUpdate,
    TeacherAttendanceCreate,
    TeacherAttendanceOut,
    TeacherAttendanceReport,
    TeacherAttendanceUpdate,
    TeacherCheck,
    TeacherMarkAbsent,
)
from schemas.common import ItemResponse
from services.people import attendance_service
from services.teacher_attendance_service import teacher_attendance_service


router = APIRouter()

records = APIRouter()
register_crud_routes(
    records,
    attendance_service,
    out_schema=AttendanceRecordOut,
    create_schema=AttendanceRecordCreate,
    update_schema=AttendanceRecordUpdate,
)


teachers = APIRouter()


@teachers.post("/check-in", response_model=ItemResponse[TeacherAttendanceOut], status_code=201)
def check_in(payload: TeacherCheck, db: Session = Depends(get_db)):
    return {"data": TeacherAttendanceOut.model_validate(teacher_attendance_service.check_in(db, payload.teacher_id))}


@teachers.post("/check-out", response_model=ItemResponse[TeacherAttendanceOut])
def check_out(payload: TeacherCheck, db: Session = Depends(get_db)):
    return {"data": TeacherAttendanceOut.model_validate(teacher_attendance_service.check_out(db, payload.teacher_id))}


@teachers.post("/mark-absent", response_model=ItemResponse[TeacherAttendanceOut])
def mark_absent(payload: TeacherMarkAbsent, db: Session = Depends(get_db)):
    record = teacher_attendance_service.mark_absent(db, payload.teacher_id, payload.date, payload.notes)
    return {"data": TeacherAttendanceOut.model_validate(record)}


@teachers.get("/report", response_model=TeacherAttendanceReport)
def attendance_report(
    teacher_id: uuid.UUID = Query(...),
    start_date: dt.date = Query(...),
    end_date: dt.date = Query(...),
    db: Session = Depends(get_db),
) -> TeacherAttendanceReport:
    report = teacher_attendance_service.report(db, teacher_id, start_date, end_date)
    return TeacherAttendanceReport(
        teacher_id=report["teacher_id"],
        start_date=report["start_date"],
        end_date=report["end_date"],
        attendance=[TeacherAttendanceOut.model_validate(r) for r in report["attendance"]],
        stats=report["stats"],
    )


register_crud_routes(
    teachers,
    teacher_attendance_service,
    out_schema=TeacherAttendanceOut,
    create_schema=TeacherAttendanceCreate,
    update_schema=TeacherAttendanceUpdate,
)


router.include_router(records, prefix="/records")
router.include_router(teachers, prefix="/teachers")
