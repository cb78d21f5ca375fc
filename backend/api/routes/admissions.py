from __future__ import annotations

from fastapi import APIRouter

from api.crud import register_crud_routes
from schemas.admissions import ApplicationCreate, ApplicationOut, ApplicationUpdate
from services.admissions_service import application_service


router = APIRouter()

applications = APIRouter()
register_crud_routes(
    applications,
    application_service,
    out_schema=ApplicationOut,
    create_schema=ApplicationCreate,
    update_schema=ApplicationUpdate,
)
router.include_router(applications, prefix="/applications")
