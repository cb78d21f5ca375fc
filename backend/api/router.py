from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_branch_id, require_branch_access
from api.routes import (
    academic_years,
    admissions,
    attendance,
    branches,
    classes,
    communications,
    enrollments,
    exams,
    fees,
    guardians,
    sections,
    staff,
    students,
    teachers,
    timetable,
)


api_router = APIRouter(dependencies=[Depends(require_branch_access)])

# Branches are the scope itself, so they are not branch-scoped.
api_router.include_router(branches.router, prefix="/branches", tags=["branches"])

# Everything else runs inside the request's branch.
_scoped = [Depends(get_branch_id)]
api_router.include_router(academic_years.router, prefix="/academic-years", tags=["academics"], dependencies=_scoped)
api_router.include_router(classes.router, prefix="/classes", tags=["academics"], dependencies=_scoped)
api_router.include_router(sections.router, prefix="/sections", tags=["academics"], dependencies=_scoped)
api_router.include_router(exams.router, prefix="/exams", tags=["academics"], dependencies=_scoped)
api_router.include_router(students.router, prefix="/students", tags=["people"], dependencies=_scoped)
api_router.include_router(guardians.router, prefix="/guardians", tags=["people"], dependencies=_scoped)
api_router.include_router(enrollments.router, prefix="/enrollments", tags=["people"], dependencies=_scoped)
api_router.include_router(staff.router, prefix="/staff", tags=["people"], dependencies=_scoped)
api_router.include_router(teachers.router, prefix="/teachers", tags=["people"], dependencies=_scoped)
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"], dependencies=_scoped)
api_router.include_router(timetable.router, prefix="/timetable", tags=["timetable"], dependencies=_scoped)
api_router.include_router(fees.router, prefix="/fees", tags=["fees"], dependencies=_scoped)
api_router.include_router(communications.router, prefix="/comms", tags=["communications"], dependencies=_scoped)
api_router.include_router(admissions.router, prefix="/admissions", tags=["admissions"], dependencies=_scoped)
