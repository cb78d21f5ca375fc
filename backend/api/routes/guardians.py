from __future__ import annotations

from fastapi import APIRouter

from api.crud import register_crud_routes
from schemas.guardian import GuardianCreate, GuardianOut, GuardianUpdate
from services.people import guardian_service


router = APIRouter()

register_crud_routes(
    router,
    guardian_service,
    out_schema=GuardianOut,
    create_schema=GuardianCreate,
    update_schema=GuardianUpdate,
)
