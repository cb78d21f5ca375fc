from __future__ import annotations

import datetime as dt
import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from api.tenant import get_by_id, where_branch
from models.teacher import Teacher
from models.teacher_attendance import TeacherAttendance
from services.crud import CrudService


logger = logging.getLogger(__name__)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _aware(value: dt.datetime | None) -> dt.datetime | None:
    # SQLite hands back naive datetimes; they were stored as UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def hours_worked(check_in: dt.datetime | None, check_out: dt.datetime | None) -> float | None:
    check_in, check_out = _aware(check_in), _aware(check_out)
    if check_in is None or check_out is None:
        return None
    if check_out < check_in:
        raise HTTPException(
            status_code=400,
            detail={"code": "INVALID_TIME_RANGE", "message": "check_out must not be before check_in"},
        )
    return round((check_out - check_in).total_seconds() / 3600, 2)


class TeacherAttendanceService(CrudService):
    model = TeacherAttendance
    resource = "TEACHER_ATTENDANCE"
    search_fields = ("status", "notes")
    default_sort = "-date"
    references = {"teacher_id": Teacher}

    def before_create(self, db: Session, data: dict[str, Any]) -> dict[str, Any]:
        data["total_hours"] = hours_worked(data.get("check_in"), data.get("check_out"))
        return data

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        if "check_in" in data or "check_out" in data:
            data["total_hours"] = hours_worked(
                data.get("check_in", obj.check_in),
                data.get("check_out", obj.check_out),
            )
        return data

    def for_day(self, db: Session, teacher_id, day: dt.date) -> TeacherAttendance | None:
        q = select(TeacherAttendance).where(TeacherAttendance.teacher_id == teacher_id, TeacherAttendance.date == day)
        return db.execute(where_branch(q, TeacherAttendance, self.branch_id)).scalars().first()

    def _teacher(self, db: Session, teacher_id) -> Teacher:
        teacher = get_by_id(db, Teacher, teacher_id, self.branch_id)
        if teacher is None:
            raise HTTPException(status_code=404, detail="TEACHER_NOT_FOUND")
        return teacher

    def check_in(self, db: Session, teacher_id, *, now: dt.datetime | None = None) -> TeacherAttendance:
        now = now or _utcnow()
        self._teacher(db, teacher_id)
        if self.for_day(db, teacher_id, now.date()) is not None:
            raise HTTPException(
                status_code=400,
                detail={"code": "ALREADY_CHECKED_IN", "message": "Already checked in for today"},
            )

        record = TeacherAttendance(teacher_id=teacher_id, date=now.date(), check_in=now, status="present")
        db.add(record)
        self.commit(db)
        db.refresh(record)
        logger.info("Teacher %s checked in at %s", teacher_id, now.isoformat())
        return record

    def check_out(self, db: Session, teacher_id, *, now: dt.datetime | None = None) -> TeacherAttendance:
        now = now or _utcnow()
        self._teacher(db, teacher_id)
        record = self.for_day(db, teacher_id, now.date())
        if record is None or record.check_in is None:
            raise HTTPException(
                status_code=404,
                detail={"code": "CHECK_IN_NOT_FOUND", "message": "No check-in found for today"},
            )
        if record.check_out is not None:
            raise HTTPException(
                status_code=400,
                detail={"code": "ALREADY_CHECKED_OUT", "message": "Already checked out for today"},
            )

        record.check_out = now
        record.total_hours = hours_worked(record.check_in, now)
        self.commit(db)
        db.refresh(record)
        return record

    def mark_absent(self, db: Session, teacher_id, day: dt.date, notes: str | None = None) -> TeacherAttendance:
        """Mark a teacher absent for `day`, overwriting whatever was recorded."""

        self._teacher(db, teacher_id)
        record = self.for_day(db, teacher_id, day)
        if record is None:
            record = TeacherAttendance(teacher_id=teacher_id, date=day)
            db.add(record)
        record.status = "absent"
        if notes is not None:
            record.notes = notes
        self.commit(db)
        db.refresh(record)
        return record

    def report(self, db: Session, teacher_id, start: dt.date, end: dt.date) -> dict[str, Any]:
        self._teacher(db, teacher_id)
        q = (
            select(TeacherAttendance)
            .where(
                TeacherAttendance.teacher_id == teacher_id,
                TeacherAttendance.date >= start,
                TeacherAttendance.date <= end,
            )
            .order_by(TeacherAttendance.date)
        )
        records = list(db.execute(where_branch(q, TeacherAttendance, self.branch_id)).scalars().all())

        counts = {"present": 0, "absent": 0, "late": 0, "half-day": 0}
        total_hours = 0.0
        for r in records:
            if r.status in counts:
                counts[r.status] += 1
            total_hours += r.total_hours or 0.0

        return {
            "teacher_id": teacher_id,
            "start_date": start,
            "end_date": end,
            "attendance": records,
            "stats": {
                "total_days": len(records),
                "present": counts["present"],
                "absent": counts["absent"],
                "late": counts["late"],
                "half_day": counts["half-day"],
                "total_hours": round(total_hours, 2),
                # Averaged over days marked present.
                "average_hours": round(total_hours / counts["present"], 2) if counts["present"] else 0.0,
            },
        }


teacher_attendance_service = TeacherAttendanceService()
