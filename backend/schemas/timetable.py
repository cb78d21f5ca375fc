from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from schemas.time_slot import HHMM_PATTERN


class PeriodBase(BaseModel):
    section_id: uuid.UUID
    day_of_week: int = Field(ge=1, le=7)
    period_number: int = Field(ge=1)
    start_time: str = Field(pattern=HHMM_PATTERN)
    end_time: str = Field(pattern=HHMM_PATTERN)
    subject_id: uuid.UUID | None = None
    teacher_id: uuid.UUID | None = None
    room_id: uuid.UUID | None = None
    academic_year_id: uuid.UUID
    is_break: bool = False
    break_type: str | None = None

    @model_validator(mode="after")
    def _check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class PeriodCreate(PeriodBase):
    pass


class PeriodUpdate(BaseModel):
    section_id: uuid.UUID | None = None
    day_of_week: int | None = Field(default=None, ge=1, le=7)
    period_number: int | None = Field(default=None, ge=1)
    start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    end_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    subject_id: uuid.UUID | None = None
    teacher_id: uuid.UUID | None = None
    room_id: uuid.UUID | None = None
    academic_year_id: uuid.UUID | None = None
    is_break: bool | None = None
    break_type: str | None = None


class PeriodOut(BaseModel):
    id: uuid.UUID
    branch_id: str | None = None
    section_id: uuid.UUID
    day_of_week: int
    period_number: int
    start_time: str
    end_time: str
    subject_id: uuid.UUID | None = None
    teacher_id: uuid.UUID | None = None
    room_id: uuid.UUID | None = None
    academic_year_id: uuid.UUID
    is_break: bool
    break_type: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class ConflictReport(BaseModel):
    has_conflicts: bool
    conflicts: list[str]


class GradeValidationOut(BaseModel):
    is_valid: bool
    message: str | None = None
    suggestion: str | None = None


class GradeSubjectOut(BaseModel):
    name: str
    code: str
    category: str
    min_grade: int
    max_grade: int


class InappropriateAssignmentOut(BaseModel):
    period_id: uuid.UUID
    section_id: uuid.UUID
    section_name: str
    class_name: str
    grade_level: int
    subject_id: uuid.UUID
    subject_name: str
    day_of_week: int
    period_number: int
    message: str | None = None
    suggestion: str | None = None


class GradeAuditOut(BaseModel):
    total_checked: int
    inappropriate_count: int
    items: list[InappropriateAssignmentOut]


class DayScheduleOut(BaseModel):
    day_of_week: int
    periods: list[PeriodOut]


class SectionTimetableOut(BaseModel):
    section_id: uuid.UUID
    academic_year_id: uuid.UUID | None = None
    days: list[DayScheduleOut]


class WorkloadOut(BaseModel):
    total_periods: int
    periods_by_day: dict[int, int]
    subjects: list[str]
    classes: list[str]


class TeacherTimetableOut(BaseModel):
    teacher_id: uuid.UUID
    periods: list[PeriodOut]
    workload: WorkloadOut


class TeacherWorkloadRow(BaseModel):
    teacher_id: uuid.UUID
    teacher_name: str
    total_periods: int
    subjects: list[str]
    classes: list[str]
    average_per_day: float


class RoomOccupancyRow(BaseModel):
    room_id: uuid.UUID
    room_code: str
    room_name: str
    room_type: str
    capacity: int
    occupied_slots: int
    total_slots: int
    occupancy_rate: float


class RoomAvailabilityOut(BaseModel):
    room_id: uuid.UUID
    day_of_week: int
    period_number: int
    academic_year_id: uuid.UUID
    available: bool
    occupied_by_period_id: uuid.UUID | None = None
    reason: str | None = None


class Allocation(BaseModel):
    subject_id: uuid.UUID
    teacher_id: uuid.UUID | None = None
    periods_per_week: int = Field(ge=1, le=48)
    preferred_room_id: uuid.UUID | None = None


class GenerateRequest(BaseModel):
    section_id: uuid.UUID
    academic_year_id: uuid.UUID
    allocations: list[Allocation] = Field(min_length=1)
    save: bool = False


class GeneratedPeriod(BaseModel):
    day_of_week: int
    period_number: int
    start_time: str
    end_time: str
    subject_id: uuid.UUID
    teacher_id: uuid.UUID | None = None
    room_id: uuid.UUID | None = None


class GenerateResult(BaseModel):
    section_id: uuid.UUID
    academic_year_id: uuid.UUID
    saved: bool
    periods: list[GeneratedPeriod]


SubstitutionStatus = Literal["pending", "approved", "rejected"]


class SubstitutionCreate(BaseModel):
    period_id: uuid.UUID
    date: dt.date
    substitute_teacher_id: uuid.UUID | None = None
    substitute_room_id: uuid.UUID | None = None
    reason: str | None = None


class SubstitutionApprove(BaseModel):
    approved_by: str = Field(min_length=1)


class SubstitutionOut(BaseModel):
    id: uuid.UUID
    branch_id: str | None = None
    period_id: uuid.UUID
    date: dt.date
    substitute_teacher_id: uuid.UUID | None = None
    substitute_room_id: uuid.UUID | None = None
    reason: str | None = None
    status: SubstitutionStatus
    approved_by: str | None = None
    approved_at: dt.datetime | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True
