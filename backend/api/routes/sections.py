from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.crud import register_crud_routes
from api.deps import list_params
from core.database import get_db
from schemas.common import ListResponse
from schemas.section import SectionCreate, SectionOut, SectionUpdate
from schemas.student import StudentOut
from services.academics import section_service
from services.list_query import ListParams
from services.people import student_service


router = APIRouter()


@router.get("/{section_id}/students", response_model=ListResponse[StudentOut])
def list_section_students(
    section_id: str,
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    section = section_service.get_one(db, section_id)
    rows, total = student_service.get_many_reference(db, "section_id", str(section.id), params)
    return {"data": [StudentOut.model_validate(r) for r in rows], "total": total}


register_crud_routes(
    router,
    section_service,
    out_schema=SectionOut,
    create_schema=SectionCreate,
    update_schema=SectionUpdate,
)
