from __future__ import annotations

import datetime as dt
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.crud import register_crud_routes
from api.deps import list_params
from core.database import get_db
from schemas.common import ItemResponse, ListResponse
from schemas.room import RoomCreate, RoomOut, RoomUpdate
from schemas.subject import SubjectCreate, SubjectOut, SubjectUpdate
from schemas.time_slot import TimeSlotCreate, TimeSlotOut, TimeSlotUpdate
from schemas.timetable import (
    ConflictReport,
    GenerateRequest,
    GenerateResult,
    GradeAuditOut,
    GradeSubjectOut,
    GradeValidationOut,
    PeriodCreate,
    PeriodOut,
    PeriodUpdate,
    RoomAvailabilityOut,
    RoomOccupancyRow,
    SectionTimetableOut,
    SubstitutionApprove,
    SubstitutionCreate,
    SubstitutionOut,
    TeacherTimetableOut,
    TeacherWorkloadRow,
)
from services.grade_mapping import get_subjects_for_grade, validate_subject_grade_assignment
from services.list_query import ListParams
from services.timetable_service import (
    period_service,
    room_service,
    subject_service,
    substitution_service,
    time_slot_service,
)


router = APIRouter()


# ---- conflict and grade checks ----------------------------------------------


@router.get("/conflicts", response_model=ConflictReport)
def check_conflicts(
    day_of_week: int = Query(ge=1, le=7),
    period_number: int = Query(ge=1),
    academic_year_id: uuid.UUID = Query(...),
    section_id: uuid.UUID | None = Query(default=None),
    teacher_id: uuid.UUID | None = Query(default=None),
    room_id: uuid.UUID | None = Query(default=None),
    exclude_id: uuid.UUID | None = Query(default=None),
    db: Session = Depends(get_db),
) -> ConflictReport:
    conflicts = period_service.find_conflicts(
        db,
        day_of_week=day_of_week,
        period_number=period_number,
        academic_year_id=academic_year_id,
        section_id=section_id,
        teacher_id=teacher_id,
        room_id=room_id,
        exclude_id=exclude_id,
    )
    return ConflictReport(has_conflicts=bool(conflicts), conflicts=conflicts)


@router.get("/grade-validation", response_model=GradeValidationOut)
def grade_validation(
    subject: str = Query(min_length=1),
    grade_level: int = Query(ge=0, le=14),
) -> GradeValidationOut:
    result = validate_subject_grade_assignment(subject, grade_level)
    return GradeValidationOut(is_valid=result.is_valid, message=result.message, suggestion=result.suggestion)


@router.get("/grade-subjects/{grade_level}", response_model=list[GradeSubjectOut])
def grade_subjects(grade_level: int) -> list[GradeSubjectOut]:
    return [
        GradeSubjectOut(
            name=s.name,
            code=s.code,
            category=s.category,
            min_grade=s.min_grade,
            max_grade=s.max_grade if s.max_grade is not None else 14,
        )
        for s in get_subjects_for_grade(grade_level)
    ]


@router.get("/audit/grade-appropriateness", response_model=GradeAuditOut)
def grade_audit(db: Session = Depends(get_db)) -> GradeAuditOut:
    return GradeAuditOut(**period_service.grade_audit(db))


# ---- views ------------------------------------------------------------------


@router.get("/section/{section_id}", response_model=SectionTimetableOut)
def section_timetable(
    section_id: uuid.UUID,
    academic_year_id: uuid.UUID | None = Query(default=None),
    db: Session = Depends(get_db),
) -> SectionTimetableOut:
    view = period_service.section_timetable(db, section_id, academic_year_id)
    return SectionTimetableOut(
        section_id=view["section_id"],
        academic_year_id=view["academic_year_id"],
        days=[
            {"day_of_week": d["day_of_week"], "periods": [PeriodOut.model_validate(p) for p in d["periods"]]}
            for d in view["days"]
        ],
    )


@router.get("/teacher/{teacher_id}", response_model=TeacherTimetableOut)
def teacher_timetable(
    teacher_id: uuid.UUID,
    academic_year_id: uuid.UUID | None = Query(default=None),
    db: Session = Depends(get_db),
) -> TeacherTimetableOut:
    view = period_service.teacher_timetable(db, teacher_id, academic_year_id)
    return TeacherTimetableOut(
        teacher_id=view["teacher_id"],
        periods=[PeriodOut.model_validate(p) for p in view["periods"]],
        workload=view["workload"],
    )


@router.get("/teacher-workload", response_model=list[TeacherWorkloadRow])
def teacher_workload(db: Session = Depends(get_db)) -> list[TeacherWorkloadRow]:
    return [TeacherWorkloadRow(**row) for row in period_service.teacher_workload(db)]


@router.get("/room-occupancy", response_model=list[RoomOccupancyRow])
def room_occupancy(db: Session = Depends(get_db)) -> list[RoomOccupancyRow]:
    return [RoomOccupancyRow(**row) for row in period_service.room_occupancy(db)]


@router.post("/generate", response_model=GenerateResult)
def generate_timetable(payload: GenerateRequest, db: Session = Depends(get_db)) -> GenerateResult:
    result = period_service.generate(
        db,
        section_id=payload.section_id,
        academic_year_id=payload.academic_year_id,
        allocations=[a.model_dump() for a in payload.allocations],
        save=payload.save,
    )
    return GenerateResult(**result)


# ---- sub-resources ----------------------------------------------------------


subjects = APIRouter()
register_crud_routes(
    subjects,
    subject_service,
    out_schema=SubjectOut,
    create_schema=SubjectCreate,
    update_schema=SubjectUpdate,
)


rooms = APIRouter()


@rooms.get("/{room_id}/availability", response_model=RoomAvailabilityOut)
def room_availability(
    room_id: uuid.UUID,
    day_of_week: int = Query(ge=1, le=7),
    period_number: int = Query(ge=1),
    academic_year_id: uuid.UUID = Query(...),
    date: dt.date | None = Query(default=None),
    db: Session = Depends(get_db),
) -> RoomAvailabilityOut:
    result = period_service.room_availability(
        db,
        room_id,
        day_of_week=day_of_week,
        period_number=period_number,
        academic_year_id=academic_year_id,
        on_date=date,
    )
    return RoomAvailabilityOut(**result)


register_crud_routes(
    rooms,
    room_service,
    out_schema=RoomOut,
    create_schema=RoomCreate,
    update_schema=RoomUpdate,
)


timeslots = APIRouter()
register_crud_routes(
    timeslots,
    time_slot_service,
    out_schema=TimeSlotOut,
    create_schema=TimeSlotCreate,
    update_schema=TimeSlotUpdate,
)


periods = APIRouter()
register_crud_routes(
    periods,
    period_service,
    out_schema=PeriodOut,
    create_schema=PeriodCreate,
    update_schema=PeriodUpdate,
)


substitutions = APIRouter()


@substitutions.get("", response_model=ListResponse[SubstitutionOut])
def list_substitutions(
    date: dt.date | None = Query(default=None),
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    if date is not None:
        rows, total = substitution_service.get_many_reference(db, "date", date.isoformat(), params)
    else:
        rows, total = substitution_service.get_list(db, params)
    return {"data": [SubstitutionOut.model_validate(r) for r in rows], "total": total}


@substitutions.post("/{substitution_id}/approve", response_model=ItemResponse[SubstitutionOut])
def approve_substitution(
    substitution_id: str,
    payload: SubstitutionApprove,
    db: Session = Depends(get_db),
):
    sub = substitution_service.approve(db, substitution_id, payload.approved_by)
    return {"data": SubstitutionOut.model_validate(sub)}


register_crud_routes(
    substitutions,
    substitution_service,
    out_schema=SubstitutionOut,
    create_schema=SubstitutionCreate,
    include_list=False,
)


router.include_router(subjects, prefix="/subjects")
router.include_router(rooms, prefix="/rooms")
router.include_router(timeslots, prefix="/timeslots")
router.include_router(periods, prefix="/periods")
router.include_router(substitutions, prefix="/substitutions")
