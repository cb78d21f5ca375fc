from __future__ import annotations

from fastapi import APIRouter

from api.crud import register_crud_routes
from schemas.academic_year import AcademicYearCreate, AcademicYearOut, AcademicYearUpdate
from services.academics import academic_year_service


router = APIRouter()

register_crud_routes(
    router,
    academic_year_service,
    out_schema=AcademicYearOut,
    create_schema=AcademicYearCreate,
    update_schema=AcademicYearUpdate,
)
