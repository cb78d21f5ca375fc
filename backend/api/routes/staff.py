from __future__ import annotations

from fastapi import APIRouter

from api.crud import register_crud_routes
from schemas.staff import StaffCreate, StaffOut, StaffUpdate
from services.people import staff_service


router = APIRouter()

register_crud_routes(
    router,
    staff_service,
    out_schema=StaffOut,
    create_schema=StaffCreate,
    update_schema=StaffUpdate,
)
