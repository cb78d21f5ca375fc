from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.crud import register_crud_routes
from api.deps import list_params
from core.database import get_db
from schemas.common import ListResponse
from schemas.school_class import SchoolClassCreate, SchoolClassOut, SchoolClassUpdate
from schemas.section import SectionOut
from services.academics import school_class_service, section_service
from services.list_query import ListParams


router = APIRouter()


@router.get("/{class_id}/sections", response_model=ListResponse[SectionOut])
def list_class_sections(
    class_id: str,
    params: ListParams = Depends(list_params),
    db: Session = Depends(get_db),
):
    school_class = school_class_service.get_one(db, class_id)
    rows, total = section_service.get_many_reference(db, "class_id", str(school_class.id), params)
    return {"data": [SectionOut.model_validate(r) for r in rows], "total": total}


register_crud_routes(
    router,
    school_class_service,
    out_schema=SchoolClassOut,
    create_schema=SchoolClassCreate,
    update_schema=SchoolClassUpdate,
)
