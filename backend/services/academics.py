from __future__ import annotations

from typing import Any

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from api.tenant import get_by_id, where_branch
from models.academic_year import AcademicYear
from models.branch import Branch
from models.exam import Exam
from models.mark import Mark
from models.school_class import SchoolClass
from models.section import Section
from models.student import Student
from models.subject import Subject
from models.teacher import Teacher
from services.crud import CrudService


class BranchService(CrudService):
    model = Branch
    resource = "BRANCH"
    search_fields = ("code", "name")
    default_sort = "name"
    # Branches are the scope itself.
    scoped = False


class AcademicYearService(CrudService):
    model = AcademicYear
    resource = "ACADEMIC_YEAR"
    search_fields = ("name",)
    default_sort = "-start_date"

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        start = data.get("start_date", obj.start_date)
        end = data.get("end_date", obj.end_date)
        if start is not None and end is not None and end < start:
            raise HTTPException(
                status_code=400,
                detail={"code": "INVALID_DATE_RANGE", "message": "end_date must not be before start_date"},
            )
        return data

    def before_delete(self, db: Session, obj) -> None:
        q = where_branch(select(Exam.id).where(Exam.academic_year_id == obj.id), Exam, self.branch_id)
        if db.execute(q.limit(1)).first() is not None:
            raise HTTPException(
                status_code=400,
                detail={
                    "code": "ACADEMIC_YEAR_HAS_EXAMS",
                    "message": "Cannot delete an academic year that still has exams",
                },
            )


class SchoolClassService(CrudService):
    model = SchoolClass
    resource = "CLASS"
    search_fields = ("name",)
    default_sort = "grade_level,name"


class SectionService(CrudService):
    model = Section
    resource = "SECTION"
    search_fields = ("name",)
    default_sort = "name"
    references = {"class_id": SchoolClass, "homeroom_teacher_id": Teacher}


class ExamService(CrudService):
    model = Exam
    resource = "EXAM"
    search_fields = ("name", "exam_type")
    default_sort = "-start_date"
    references = {"academic_year_id": AcademicYear}

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        start = data.get("start_date", obj.start_date)
        end = data.get("end_date", obj.end_date)
        if start is not None and end is not None and end < start:
            raise HTTPException(
                status_code=400,
                detail={"code": "INVALID_DATE_RANGE", "message": "end_date must not be before start_date"},
            )
        return data

    def before_create(self, db: Session, data: dict[str, Any]) -> dict[str, Any]:
        start, end = data.get("start_date"), data.get("end_date")
        if start is not None and end is not None and end < start:
            raise HTTPException(
                status_code=400,
                detail={"code": "INVALID_DATE_RANGE", "message": "end_date must not be before start_date"},
            )
        return data


class MarkService(CrudService):
    model = Mark
    resource = "MARK"
    search_fields = ("grade", "comments")
    default_sort = "-created_at"
    references = {"exam_id": Exam, "student_id": Student, "subject_id": Subject}

    def check_bounds(self, db: Session, exam_id, raw_marks) -> None:
        """Scores stay within 0..max_marks of their exam (no upper bound when unset)."""

        if raw_marks is None:
            return
        exam = get_by_id(db, Exam, exam_id, self.branch_id)
        max_marks = exam.max_marks if exam is not None else None
        if raw_marks < 0 or (max_marks is not None and raw_marks > max_marks):
            raise HTTPException(
                status_code=400,
                detail={
                    "code": "MARKS_OUT_OF_RANGE",
                    "message": f"raw_marks {raw_marks:g} is outside 0..{max_marks if max_marks is not None else 'inf'}",
                },
            )

    def before_create(self, db: Session, data: dict[str, Any]) -> dict[str, Any]:
        self.check_bounds(db, data["exam_id"], data.get("raw_marks"))
        return data

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        self.check_bounds(db, data.get("exam_id", obj.exam_id), data.get("raw_marks", obj.raw_marks))
        return data


branch_service = BranchService()
academic_year_service = AcademicYearService()
school_class_service = SchoolClassService()
section_service = SectionService()
exam_service = ExamService()
mark_service = MarkService()
