from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.crud import register_crud_routes
from api.deps import list_params
from core.database import get_db
from schemas.common import ListResponse
from schemas.guardian import GuardianOut
from schemas.student import StudentCreate, StudentOut, StudentUpdate
from services.list_query import ListParams
from services.people import guardian_service, student_service


router = APIRouter()


@router.get("/{student_id}/guardians", response_model=ListResponse[GuardianOut])
def list_student_guardians(
    student_id: str,
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    student = student_service.get_one(db, student_id)
    rows, total = guardian_service.get_many_reference(db, "student_id", str(student.id), params)
    return {"data": [GuardianOut.model_validate(r) for r in rows], "total": total}


register_crud_routes(
    router,
    student_service,
    out_schema=StudentOut,
    create_schema=StudentCreate,
    update_schema=StudentUpdate,
)
