# FastAPI resolves endpoint annotations at definition time here; this module
# must not use postponed annotations.
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from api.deps import list_params
from core.database import get_db
from schemas.common import BulkResult, BulkUpdateRequest, ItemResponse, ListResponse
from services.crud import CrudService
from services.list_query import ListParams, parse_ids


logger = logging.getLogger(__name__)


def register_crud_routes(
    router: APIRouter,
    service: CrudService,
    *,
    out_schema: Any,
    create_schema: Any = None,
    update_schema: Any = None,
    put_schema: Any = None,
    include_list: bool = True,
    include_delete: bool = True,
) -> APIRouter:
    """Attach the React-Admin style list/get/create/update/delete routes.

    Create routes exist only with a `create_schema`, PUT/PATCH only with an
    `update_schema`. Call this after a module's own routes: `/{item_id}`
    would otherwise shadow static paths such as `/stats`.
    """

    name = service.resource.lower()
    put_schema = put_schema or create_schema

    def to_out(obj):
        return out_schema.model_validate(obj)

    if include_list:

        @router.get("", response_model=ListResponse[out_schema], name=f"list_{name}")
        def list_items(
            params: ListParams = Depends(list_params),
            db: Session = Depends(get_db),
        ):
            rows, total = service.get_list(db, params)
            return {"data": [to_out(r) for r in rows], "total": total}

    @router.get("/{item_id}", response_model=ItemResponse[out_schema], name=f"get_{name}")
    def get_item(item_id: str, db: Session = Depends(get_db)):
        return {"data": to_out(service.get_one(db, item_id))}

    if create_schema is not None:

        @router.post("", response_model=ItemResponse[out_schema], status_code=201, name=f"create_{name}")
        def create_item(payload: create_schema, db: Session = Depends(get_db)):
            return {"data": to_out(service.create(db, payload.model_dump()))}

    if update_schema is not None:
        if put_schema is not None:

            @router.put("/{item_id}", response_model=ItemResponse[out_schema], name=f"replace_{name}")
            def replace_item(item_id: str, payload: put_schema, db: Session = Depends(get_db)):
                return {"data": to_out(service.update(db, item_id, payload.model_dump()))}

        @router.patch("/{item_id}", response_model=ItemResponse[out_schema], name=f"update_{name}")
        def update_item(item_id: str, payload: update_schema, db: Session = Depends(get_db)):
            return {"data": to_out(service.update(db, item_id, payload.model_dump(exclude_unset=True)))}

        @router.patch("", response_model=BulkResult, name=f"update_many_{name}")
        def update_many(payload: BulkUpdateRequest = Body(...), db: Session = Depends(get_db)):
            return {"data": service.update_many(db, payload.ids, payload.data, schema=update_schema)}

    if include_delete:

        @router.delete("/{item_id}", response_model=ItemResponse[out_schema], name=f"delete_{name}")
        def delete_item(item_id: str, db: Session = Depends(get_db)):
            obj = service.delete(db, item_id)
            logger.info("Deleted %s %s", name, item_id)
            return {"data": to_out(obj)}

        @router.delete("", response_model=BulkResult, name=f"delete_many_{name}")
        def delete_many(ids: str = Query(...), db: Session = Depends(get_db)):
            return {"data": service.delete_many(db, parse_ids(ids) or ())}

    return router
