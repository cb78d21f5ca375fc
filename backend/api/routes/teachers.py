from __future__ import annotations

from fastapi import APIRouter

from api.crud import register_crud_routes
from schemas.teacher import TeacherCreate, TeacherOut, TeacherUpdate
from services.people import teacher_service


router = APIRouter()

register_crud_routes(
    router,
    teacher_service,
    out_schema=TeacherOut,
    create_schema=TeacherCreate,
    update_schema=TeacherUpdate,
)
