from __future__ import annotations

from fastapi import APIRouter

from api.crud import register_crud_routes
from schemas.exam import ExamCreate, ExamOut, ExamUpdate, MarkCreate, MarkOut, MarkUpdate
from services.academics import exam_service, mark_service


router = APIRouter()

marks = APIRouter()
register_crud_routes(
    marks,
    mark_service,
    out_schema=MarkOut,
    create_schema=MarkCreate,
    update_schema=MarkUpdate,
)
# Mounted before the exam routes so `/{item_id}` does not swallow `/marks`.
router.include_router(marks, prefix="/marks")

register_crud_routes(
    router,
    exam_service,
    out_schema=ExamOut,
    create_schema=ExamCreate,
    update_schema=ExamUpdate,
)
