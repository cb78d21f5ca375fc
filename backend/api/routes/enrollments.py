from __future__ import annotations

from fastapi import APIRouter

from api.crud import register_crud_routes
from schemas.enrollment import EnrollmentCreate, EnrollmentOut, EnrollmentUpdate
from services.people import enrollment_service


router = APIRouter()

register_crud_routes(
    router,
    enrollment_service,
    out_schema=EnrollmentOut,
    create_schema=EnrollmentCreate,
    update_schema=EnrollmentUpdate,
)
