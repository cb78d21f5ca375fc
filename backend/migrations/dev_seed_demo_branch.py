"""Seed a demo branch with the records needed to try the timetable.

Creates (if missing) branch `demo`, an active academic year, classes 1-3 with
sections A/B, core subjects, rooms, a 6x8 weekly slot grid and a few teachers.
Idempotent: rows are matched on their natural keys inside the branch.

Run:
  python backend/migrations/dev_seed_demo_branch.py --yes
  python backend/migrations/dev_seed_demo_branch.py --yes --branch-id north
"""

from __future__ import annotations

import argparse
import datetime as dt
import sys
from pathlib import Path

# Allow running this script from any working directory.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select

from core.bootstrap import bootstrap_schema
from core.database import SessionLocal
from core.tenancy import scope_context
from models import (
    AcademicYear,
    Branch,
    Room,
    SchoolClass,
    Section,
    Staff,
    Subject,
    Teacher,
    TimeSlot,
)
from services.timetable_generator import DAYS, PERIODS_PER_DAY, period_times


CLASSES = [("Class 1", 1), ("Class 2", 2), ("Class 3", 3)]
SECTION_NAMES = ["A", "B"]
SUBJECTS = [
    ("ENG", "English"),
    ("MATH", "Mathematics"),
    ("EVS", "Environmental Studies"),
    ("HINDI", "Hindi"),
    ("ART", "Art"),
    ("PE", "Physical Education"),
]
ROOMS = [
    ("R101", "Room 101", "classroom", 40),
    ("R102", "Room 102", "classroom", 40),
    ("R103", "Room 103", "classroom", 40),
    ("ART1", "Art Studio", "other", 30),
    ("GYM", "Sports Hall", "sports", 80),
]
TEACHERS = [
    ("Asha", "Verma", "English"),
    ("Rohit", "Mehta", "Mathematics"),
    ("Neha", "Kapoor", "Environmental Studies"),
    ("Vikram", "Singh", "Physical Education"),
]


def _get_or_add(db, model, lookup: dict, **values):
    stmt = select(model)
    for key, value in lookup.items():
        stmt = stmt.where(getattr(model, key) == value)
    if hasattr(model, "branch_id") and "branch_id" not in lookup:
        stmt = stmt.where(model.branch_id == values.get("branch_id"))
    obj = db.execute(stmt).scalars().first()
    if obj is not None:
        return obj, False
    obj = model(**lookup, **values)
    db.add(obj)
    db.flush()
    return obj, True


def seed(branch_id: str) -> dict[str, int]:
    counts: dict[str, int] = {}

    def bump(name: str, created: bool) -> None:
        if created:
            counts[name] = counts.get(name, 0) + 1

    with scope_context(branch_id=branch_id), SessionLocal() as db:
        _, created = _get_or_add(db, Branch, {"id": branch_id}, code=branch_id.upper(), name=f"{branch_id.title()} Campus")
        bump("branches", created)

        today = dt.date.today()
        start_year = today.year if today.month >= 4 else today.year - 1
        _, created = _get_or_add(
            db,
            AcademicYear,
            {"name": f"{start_year}-{start_year + 1}"},
            branch_id=branch_id,
            start_date=dt.date(start_year, 4, 1),
            end_date=dt.date(start_year + 1, 3, 31),
            is_active=True,
        )
        bump("academic_years", created)

        for class_name, level in CLASSES:
            school_class, created = _get_or_add(db, SchoolClass, {"name": class_name}, branch_id=branch_id, grade_level=level)
            bump("classes", created)
            for section_name in SECTION_NAMES:
                _, created = _get_or_add(
                    db,
                    Section,
                    {"class_id": school_class.id, "name": section_name},
                    branch_id=branch_id,
                    capacity=40,
                )
                bump("sections", created)

        for code, name in SUBJECTS:
            _, created = _get_or_add(db, Subject, {"code": code}, branch_id=branch_id, name=name)
            bump("subjects", created)

        for code, name, room_type, capacity in ROOMS:
            _, created = _get_or_add(db, Room, {"code": code}, branch_id=branch_id, name=name, type=room_type, capacity=capacity)
            bump("rooms", created)

        for day in DAYS:
            for period in range(1, PERIODS_PER_DAY + 1):
                start, end = period_times(period)
                _, created = _get_or_add(
                    db,
                    TimeSlot,
                    {"day_of_week": day, "period_number": period},
                    branch_id=branch_id,
                    start_time=start,
                    end_time=end,
                )
                bump("time_slots", created)

        for first, last, subject in TEACHERS:
            email = f"{first.lower()}.{last.lower()}@{branch_id}.example.org"
            staff, created = _get_or_add(
                db,
                Staff,
                {"email": email},
                branch_id=branch_id,
                first_name=first,
                last_name=last,
                designation="Teacher",
                employment_type="full_time",
                join_date=today,
            )
            bump("staff", created)
            _, created = _get_or_add(db, Teacher, {"staff_id": staff.id}, branch_id=branch_id, subjects=subject)
            bump("teachers", created)

        db.commit()
    return counts


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--yes", action="store_true", help="Actually apply changes")
    parser.add_argument("--branch-id", default="demo", help="Branch to create or top up")
    args = parser.parse_args()

    if not args.yes:
        print(f"Dry run. Re-run with --yes to seed branch {args.branch_id!r}.")
        return

    bootstrap_schema()
    counts = seed(args.branch_id.strip())
    if not counts:
        print("OK: nothing to do, demo data already present.")
        return
    for name, n in sorted(counts.items()):
        print(f"  created {n} {name}")
    print("OK: demo branch seeded.")


if __name__ == "__main__":
    main()
