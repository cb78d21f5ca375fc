from __future__ import annotations

from fastapi import APIRouter

from api.crud import register_crud_routes
from schemas.branch import BranchCreate, BranchOut, BranchPut, BranchUpdate
from services.academics import branch_service


router = APIRouter()

register_crud_routes(
    router,
    branch_service,
    out_schema=BranchOut,
    create_schema=BranchCreate,
    update_schema=BranchUpdate,
    put_schema=BranchPut,
)
