from __future__ import annotations

import datetime as dt
import logging
import random
import uuid
from collections import defaultdict
from dataclasses import asdict
from typing import Any

from fastapi import HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from api.tenant import get_by_id, where_branch
from models.academic_year import AcademicYear
from models.room import Room
from models.school_class import SchoolClass
from models.section import Section
from models.subject import Subject
from models.substitution import Substitution
from models.teacher import Teacher
from models.time_slot import TimeSlot
from models.timetable_period import TimetablePeriod
from services.crud import CrudService
from services.grade_mapping import GradeValidation, resolve_grade_level, validate_subject_grade_assignment
from services.timetable_generator import (
    DAYS,
    PERIODS_PER_DAY,
    AllocationSpec,
    NotEnoughSlotsError,
    PlannedPeriod,
    generate_periods,
)


logger = logging.getLogger(__name__)


SECTION_CONFLICT = "Section already has a period in this time slot"
TEACHER_CONFLICT = "Teacher already has a period in this time slot"
ROOM_CONFLICT = "Room already occupied in this time slot"


class SubjectService(CrudService):
    model = Subject
    resource = "SUBJECT"
    search_fields = ("code", "name", "description")
    default_sort = "code"


class RoomService(CrudService):
    model = Room
    resource = "ROOM"
    search_fields = ("code", "name", "building")
    default_sort = "code"


class TimeSlotService(CrudService):
    model = TimeSlot
    resource = "TIME_SLOT"
    search_fields = ("start_time", "end_time", "slot_type")
    default_sort = "day_of_week,period_number"


class PeriodService(CrudService):
    model = TimetablePeriod
    resource = "PERIOD"
    search_fields = ("start_time", "end_time", "break_type")
    default_sort = "day_of_week,period_number"
    references = {
        "section_id": Section,
        "subject_id": Subject,
        "teacher_id": Teacher,
        "room_id": Room,
        "academic_year_id": AcademicYear,
    }

    def find_conflicts(
        self,
        db: Session,
        *,
        day_of_week: int,
        period_number: int,
        academic_year_id,
        section_id=None,
        teacher_id=None,
        room_id=None,
        exclude_id=None,
    ) -> list[str]:
        """Point queries per dimension on (day, period number, academic year)."""

        slot = select(TimetablePeriod.id).where(
            TimetablePeriod.day_of_week == day_of_week,
            TimetablePeriod.period_number == period_number,
            TimetablePeriod.academic_year_id == academic_year_id,
        )
        slot = where_branch(slot, TimetablePeriod, self.branch_id)
        if exclude_id is not None:
            slot = slot.where(TimetablePeriod.id != exclude_id)

        conflicts: list[str] = []
        if section_id is not None and db.execute(slot.where(TimetablePeriod.section_id == section_id).limit(1)).first():
            conflicts.append(SECTION_CONFLICT)
        if teacher_id is not None and db.execute(slot.where(TimetablePeriod.teacher_id == teacher_id).limit(1)).first():
            conflicts.append(TEACHER_CONFLICT)
        if room_id is not None and db.execute(slot.where(TimetablePeriod.room_id == room_id).limit(1)).first():
            conflicts.append(ROOM_CONFLICT)
        return conflicts

    def section_grade_level(self, db: Session, section_id) -> tuple[int, Section | None, SchoolClass | None]:
        section = get_by_id(db, Section, section_id, self.branch_id)
        school_class = section.school_class if section is not None else None
        level = resolve_grade_level(
            grade_level=school_class.grade_level if school_class is not None else None,
            class_name=school_class.name if school_class is not None else None,
        )
        return level, section, school_class

    def validate_grade(self, db: Session, *, subject_id, section_id) -> GradeValidation:
        subject = get_by_id(db, Subject, subject_id, self.branch_id)
        if subject is None:
            raise HTTPException(status_code=404, detail="SUBJECT_NOT_FOUND")
        level, _, _ = self.section_grade_level(db, section_id)
        return validate_subject_grade_assignment(subject.name, level)

    def _check_period(self, db: Session, data: dict[str, Any], *, exclude_id=None) -> None:
        conflicts = self.find_conflicts(
            db,
            day_of_week=data["day_of_week"],
            period_number=data["period_number"],
            academic_year_id=data["academic_year_id"],
            section_id=data.get("section_id"),
            teacher_id=data.get("teacher_id"),
            room_id=data.get("room_id"),
            exclude_id=exclude_id,
        )
        if conflicts:
            raise HTTPException(
                status_code=400,
                detail={
                    "code": "PERIOD_CONFLICT",
                    "message": f"Conflicts detected: {', '.join(conflicts)}",
                    "errors": conflicts,
                },
            )

        if data.get("subject_id") is not None and not data.get("is_break"):
            result = self.validate_grade(db, subject_id=data["subject_id"], section_id=data["section_id"])
            if not result.is_valid:
                raise HTTPException(
                    status_code=400,
                    detail={
                        "code": "INAPPROPRIATE_SUBJECT",
                        "message": f"Inappropriate subject assignment: {result.message}. {result.suggestion or ''}".strip(),
                    },
                )

    def before_create(self, db: Session, data: dict[str, Any]) -> dict[str, Any]:
        self._check_period(db, data)
        return data

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        start = data.get("start_time") or obj.start_time
        end = data.get("end_time") or obj.end_time
        if end <= start:
            raise HTTPException(
                status_code=400,
                detail={"code": "INVALID_TIME_RANGE", "message": "end_time must be after start_time"},
            )

        merged = {
            "section_id": obj.section_id,
            "day_of_week": obj.day_of_week,
            "period_number": obj.period_number,
            "academic_year_id": obj.academic_year_id,
            "subject_id": obj.subject_id,
            "teacher_id": obj.teacher_id,
            "room_id": obj.room_id,
            "is_break": obj.is_break,
        }
        merged.update({k: v for k, v in data.items() if k in merged})
        self._check_period(db, merged, exclude_id=obj.id)
        return data

    # ---- views -------------------------------------------------------------

    def _periods(self, db: Session, *conditions):
        q = (
            select(TimetablePeriod)
            .options(
                joinedload(TimetablePeriod.subject),
                joinedload(TimetablePeriod.section).joinedload(Section.school_class),
            )
            .where(*conditions)
            .order_by(TimetablePeriod.day_of_week, TimetablePeriod.period_number, TimetablePeriod.id)
        )
        q = where_branch(q, TimetablePeriod, self.branch_id)
        return list(db.execute(q).unique().scalars().all())

    def section_timetable(self, db: Session, section_id, academic_year_id=None) -> dict[str, Any]:
        if get_by_id(db, Section, section_id, self.branch_id) is None:
            raise HTTPException(status_code=404, detail="SECTION_NOT_FOUND")
        conditions = [TimetablePeriod.section_id == section_id]
        if academic_year_id is not None:
            conditions.append(TimetablePeriod.academic_year_id == academic_year_id)

        by_day: dict[int, list[TimetablePeriod]] = defaultdict(list)
        for period in self._periods(db, *conditions):
            by_day[period.day_of_week].append(period)
        return {
            "section_id": section_id,
            "academic_year_id": academic_year_id,
            "days": [{"day_of_week": day, "periods": by_day[day]} for day in sorted(by_day)],
        }

    @staticmethod
    def workload(periods: list[TimetablePeriod]) -> dict[str, Any]:
        # Keyed 0..6 for days 1..7.
        per_day = {day: 0 for day in range(7)}
        for p in periods:
            if p.day_of_week - 1 in per_day:
                per_day[p.day_of_week - 1] += 1
        subjects = sorted({p.subject.name for p in periods if p.subject is not None})
        classes = sorted(
            {p.section.school_class.name for p in periods if p.section is not None and p.section.school_class is not None}
        )
        return {
            "total_periods": len(periods),
            "periods_by_day": per_day,
            "subjects": subjects,
            "classes": classes,
        }

    def teacher_timetable(self, db: Session, teacher_id, academic_year_id=None) -> dict[str, Any]:
        if get_by_id(db, Teacher, teacher_id, self.branch_id) is None:
            raise HTTPException(status_code=404, detail="TEACHER_NOT_FOUND")
        conditions = [TimetablePeriod.teacher_id == teacher_id]
        if academic_year_id is not None:
            conditions.append(TimetablePeriod.academic_year_id == academic_year_id)
        periods = self._periods(db, *conditions)
        return {"teacher_id": teacher_id, "periods": periods, "workload": self.workload(periods)}

    def teacher_workload(self, db: Session) -> list[dict[str, Any]]:
        teachers = db.execute(where_branch(select(Teacher), Teacher, self.branch_id)).unique().scalars().all()
        periods = self._periods(db, TimetablePeriod.teacher_id.is_not(None))
        by_teacher: dict[uuid.UUID, list[TimetablePeriod]] = defaultdict(list)
        for p in periods:
            by_teacher[p.teacher_id].append(p)

        rows = []
        for teacher in teachers:
            mine = by_teacher.get(teacher.id, [])
            load = self.workload(mine)
            rows.append(
                {
                    "teacher_id": teacher.id,
                    "teacher_name": teacher.display_name,
                    "total_periods": load["total_periods"],
                    "subjects": load["subjects"],
                    "classes": load["classes"],
                    # Averaged over a five-day week.
                    "average_per_day": round(load["total_periods"] / 5, 1),
                }
            )
        rows.sort(key=lambda r: (-r["total_periods"], r["teacher_name"]))
        return rows

    def room_occupancy(self, db: Session) -> list[dict[str, Any]]:
        rooms = db.execute(
            where_branch(select(Room).where(Room.is_active.is_(True)).order_by(Room.code), Room, self.branch_id)
        ).scalars().all()

        total_slots = db.execute(
            where_branch(select(func.count(TimeSlot.id)).where(TimeSlot.slot_type == "regular"), TimeSlot, self.branch_id)
        ).scalar_one()
        if not total_slots:
            total_slots = len(DAYS) * PERIODS_PER_DAY

        counts_q = where_branch(
            select(TimetablePeriod.room_id, func.count(TimetablePeriod.id))
            .where(TimetablePeriod.room_id.is_not(None))
            .group_by(TimetablePeriod.room_id),
            TimetablePeriod,
            self.branch_id,
        )
        counts = {room_id: n for room_id, n in db.execute(counts_q).all()}

        return [
            {
                "room_id": room.id,
                "room_code": room.code,
                "room_name": room.name,
                "room_type": room.type,
                "capacity": room.capacity,
                "occupied_slots": counts.get(room.id, 0),
                "total_slots": int(total_slots),
                "occupancy_rate": round(counts.get(room.id, 0) / int(total_slots) * 100),
            }
            for room in rooms
        ]

    def room_availability(
        self,
        db: Session,
        room_id,
        *,
        day_of_week: int,
        period_number: int,
        academic_year_id,
        on_date: dt.date | None = None,
    ) -> dict[str, Any]:
        if get_by_id(db, Room, room_id, self.branch_id) is None:
            raise HTTPException(status_code=404, detail="ROOM_NOT_FOUND")

        out: dict[str, Any] = {
            "room_id": room_id,
            "day_of_week": day_of_week,
            "period_number": period_number,
            "academic_year_id": academic_year_id,
            "available": True,
        }
        q = where_branch(
            select(TimetablePeriod).where(
                TimetablePeriod.room_id == room_id,
                TimetablePeriod.day_of_week == day_of_week,
                TimetablePeriod.period_number == period_number,
                TimetablePeriod.academic_year_id == academic_year_id,
            ),
            TimetablePeriod,
            self.branch_id,
        )
        period = db.execute(q.limit(1)).scalars().first()
        if period is None:
            return out

        if on_date is not None:
            sub = db.execute(
                select(Substitution).where(
                    Substitution.period_id == period.id,
                    Substitution.date == on_date,
                    Substitution.status == "approved",
                )
            ).scalars().first()
            if sub is not None and sub.substitute_room_id != room_id:
                out["reason"] = "Room freed due to substitution"
                return out

        out["available"] = False
        out["occupied_by_period_id"] = period.id
        return out

    def grade_audit(self, db: Session) -> dict[str, Any]:
        periods = self._periods(
            db,
            TimetablePeriod.subject_id.is_not(None),
            TimetablePeriod.is_break.is_(False),
        )
        items = []
        for p in periods:
            school_class = p.section.school_class if p.section is not None else None
            level = resolve_grade_level(
                grade_level=school_class.grade_level if school_class is not None else None,
                class_name=school_class.name if school_class is not None else None,
            )
            result = validate_subject_grade_assignment(p.subject.name, level)
            if result.is_valid:
                continue
            items.append(
                {
                    "period_id": p.id,
                    "section_id": p.section_id,
                    "section_name": p.section.name if p.section is not None else "",
                    "class_name": school_class.name if school_class is not None else "",
                    "grade_level": level,
                    "subject_id": p.subject_id,
                    "subject_name": p.subject.name,
                    "day_of_week": p.day_of_week,
                    "period_number": p.period_number,
                    "message": result.message,
                    "suggestion": result.suggestion,
                }
            )
        if items:
            logger.info("Grade audit found %s inappropriate assignments", len(items))
        return {"total_checked": len(periods), "inappropriate_count": len(items), "items": items}

    # ---- generator ---------------------------------------------------------

    def generate(
        self,
        db: Session,
        *,
        section_id,
        academic_year_id,
        allocations: list[dict[str, Any]],
        save: bool = False,
        rng: random.Random | None = None,
    ) -> dict[str, Any]:
        self.check_references(db, {"section_id": section_id, "academic_year_id": academic_year_id})
        for alloc in allocations:
            self.check_references(
                db,
                {
                    "subject_id": alloc.get("subject_id"),
                    "teacher_id": alloc.get("teacher_id"),
                    "room_id": alloc.get("preferred_room_id"),
                },
            )

        specs = [
            AllocationSpec(
                subject_id=a["subject_id"],
                teacher_id=a.get("teacher_id"),
                periods_per_week=int(a["periods_per_week"]),
                preferred_room_id=a.get("preferred_room_id"),
            )
            for a in allocations
        ]
        try:
            planned = generate_periods(specs, rng=rng)
        except NotEnoughSlotsError as exc:
            raise HTTPException(
                status_code=400,
                detail={"code": "NOT_ENOUGH_TIME_SLOTS", "message": str(exc)},
            )

        if save:
            self._replace_section_periods(db, section_id, academic_year_id, planned)

        return {
            "section_id": section_id,
            "academic_year_id": academic_year_id,
            "saved": bool(save),
            "periods": [asdict(p) for p in planned],
        }

    def _replace_section_periods(self, db: Session, section_id, academic_year_id, planned: list[PlannedPeriod]) -> None:
        stmt = delete(TimetablePeriod).where(
            TimetablePeriod.section_id == section_id,
            TimetablePeriod.academic_year_id == academic_year_id,
        )
        stmt = where_branch(stmt, TimetablePeriod, self.branch_id)
        try:
            db.execute(stmt.execution_options(synchronize_session=False))
            for p in planned:
                db.add(
                    TimetablePeriod(
                        section_id=section_id,
                        academic_year_id=academic_year_id,
                        day_of_week=p.day_of_week,
                        period_number=p.period_number,
                        start_time=p.start_time,
                        end_time=p.end_time,
                        subject_id=p.subject_id,
                        teacher_id=p.teacher_id,
                        room_id=p.room_id,
                        is_break=False,
                    )
                )
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(status_code=409, detail="PERIOD_CONFLICT")
        logger.info("Saved %s generated periods for section %s", len(planned), section_id)


class SubstitutionService(CrudService):
    model = Substitution
    resource = "SUBSTITUTION"
    search_fields = ("reason", "approved_by")
    default_sort = "-date"
    references = {
        "period_id": TimetablePeriod,
        "substitute_teacher_id": Teacher,
        "substitute_room_id": Room,
    }

    def before_create(self, db: Session, data: dict[str, Any]) -> dict[str, Any]:
        existing = where_branch(
            select(Substitution.id).where(
                Substitution.period_id == data["period_id"],
                Substitution.date == data["date"],
            ),
            Substitution,
            self.branch_id,
        )
        if db.execute(existing.limit(1)).first() is not None:
            raise HTTPException(
                status_code=400,
                detail={
                    "code": "SUBSTITUTION_EXISTS",
                    "message": "Substitution already exists for this period and date",
                },
            )

        teacher_id = data.get("substitute_teacher_id")
        if teacher_id is not None:
            period = get_by_id(db, TimetablePeriod, data["period_id"], self.branch_id)
            busy = where_branch(
                select(TimetablePeriod.id).where(
                    TimetablePeriod.teacher_id == teacher_id,
                    TimetablePeriod.day_of_week == period.day_of_week,
                    TimetablePeriod.period_number == period.period_number,
                    TimetablePeriod.academic_year_id == period.academic_year_id,
                ),
                TimetablePeriod,
                self.branch_id,
            )
            if db.execute(busy.limit(1)).first() is not None:
                raise HTTPException(
                    status_code=400,
                    detail={
                        "code": "SUBSTITUTE_UNAVAILABLE",
                        "message": "Substitute teacher is not available at this time",
                    },
                )

        data["status"] = "pending"
        return data

    def approve(self, db: Session, obj_id, approved_by: str) -> Substitution:
        sub = self.get_one(db, obj_id)
        if sub.status != "pending":
            raise HTTPException(
                status_code=400,
                detail={
                    "code": "SUBSTITUTION_NOT_PENDING",
                    "message": f"Substitution is already {sub.status}",
                },
            )
        sub.status = "approved"
        sub.approved_by = approved_by
        sub.approved_at = dt.datetime.now(dt.timezone.utc)
        self.commit(db)
        db.refresh(sub)
        return sub


subject_service = SubjectService()
room_service = RoomService()
time_slot_service = TimeSlotService()
period_service = PeriodService()
substitution_service = SubstitutionService()
