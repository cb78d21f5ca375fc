from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel


AttendanceStatus = Literal["present", "absent", "late", "excused"]


class AttendanceRecordBase(BaseModel):
    student_id: uuid.UUID
    section_id: uuid.UUID | None = None
    date: dt.date
    status: AttendanceStatus = "present"
    reason: str | None = None
    marked_by: str | None = None
    source: str | None = None


class AttendanceRecordCreate(AttendanceRecordBase):
    pass


class AttendanceRecordUpdate(BaseModel):
    student_id: uuid.UUID | None = None
    section_id: uuid.UUID | None = None
    date: dt.date | None = None
    status: AttendanceStatus | None = None
    reason: str | None = None
    marked_by: str | None = None
    source: str | None = None


class AttendanceRecordOut(AttendanceRecordBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


TeacherAttendanceStatus = Literal["present", "absent", "late", "half-day"]


class TeacherAttendanceBase(BaseModel):
    teacher_id: uuid.UUID
    date: dt.date
    status: TeacherAttendanceStatus = "present"
    check_in: dt.datetime | None = None
    check_out: dt.datetime | None = None
    notes: str | None = None


class TeacherAttendanceCreate(TeacherAttendanceBase):
    pass


class TeacherAttendanceUpdate(BaseModel):
    status: TeacherAttendanceStatus | None = None
    check_in: dt.datetime | None = None
    check_out: dt.datetime | None = None
    notes: str | None = None


class TeacherAttendanceOut(TeacherAttendanceBase):
    id: uuid.UUID
    branch_id: str | None = None
    total_hours: float | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class TeacherCheck(BaseModel):
    teacher_id: uuid.UUID


class TeacherMarkAbsent(BaseModel):
    teacher_id: uuid.UUID
    date: dt.date
    notes: str | None = None


class TeacherAttendanceStats(BaseModel):
    total_days: int
    present: int
    absent: int
    late: int
    half_day: int
    total_hours: float
    average_hours: float


class TeacherAttendanceReport(BaseModel):
    teacher_id: uuid.UUID
    start_date: dt.date
    end_date: dt.date
    attendance: list[TeacherAttendanceOut]
    stats: TeacherAttendanceStats
