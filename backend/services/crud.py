from __future__ import annotations

import datetime as dt
import logging
import uuid
from decimal import Decimal
from typing import Any, Iterable

from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy import false, func, inspect, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.tenant import get_by_id, where_branch
from core.tenancy import get_current_branch_id
from services.list_query import ListParams, SortField, camel_to_snake, parse_sort


logger = logging.getLogger(__name__)


_FILTER_OPERATORS = ("_gte", "_lte", "_in", "_contains")

# Keys consumed by free-text search rather than column filters.
_SEARCH_KEYS = ("q", "search")


class Uncoercible(ValueError):
    pass


def coerce_value(column, value: Any) -> Any:
    """Coerce a loosely-typed query value to the column's Python type."""

    if value is None:
        return None
    try:
        py_type = column.type.python_type
    except NotImplementedError:
        return value

    try:
        if py_type is bool:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in ("true", "1", "yes"):
                return True
            if text in ("false", "0", "no"):
                return False
            raise Uncoercible(value)
        if py_type is uuid.UUID:
            return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value).strip())
        if py_type is int:
            if isinstance(value, bool):
                raise Uncoercible(value)
            return int(str(value).strip())
        if py_type is float:
            return float(value)
        if py_type is Decimal:
            return Decimal(str(value))
        if py_type is dt.datetime:
            if isinstance(value, dt.datetime):
                return value
            return dt.datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        if py_type is dt.date:
            if isinstance(value, dt.date):
                return value
            return dt.date.fromisoformat(str(value).strip()[:10])
        if py_type is str:
            if isinstance(value, (dict, list)):
                raise Uncoercible(value)
            return str(value)
    except Uncoercible:
        raise
    except (TypeError, ValueError, ArithmeticError) as exc:
        raise Uncoercible(value) from exc
    return value


class CrudService:
    """Branch-scoped list/get/create/update/delete for one model.

    Subclasses set `model`, `resource` (error-code prefix) and optionally
    `search_fields`, `default_sort` and `references` (field -> model whose
    row must be visible in the current branch).
    """

    model: Any = None
    resource: str = "RECORD"
    search_fields: tuple[str, ...] = ()
    default_sort: str = "-created_at"
    references: dict[str, Any] = {}
    scoped: bool = True

    # ---- helpers ---------------------------------------------------------

    @property
    def branch_id(self) -> str | None:
        return get_current_branch_id() if self.scoped else None

    @property
    def columns(self) -> dict[str, Any]:
        return {c.key: c for c in inspect(self.model).column_attrs}

    def not_found(self) -> HTTPException:
        return HTTPException(status_code=404, detail=f"{self.resource}_NOT_FOUND")

    def base_query(self):
        return where_branch(select(self.model), self.model, self.branch_id)

    def commit(self, db: Session, *, code: str | None = None) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.info("Integrity error on %s: %s", self.resource, exc.orig)
            raise HTTPException(
                status_code=409,
                detail={
                    "code": code or f"{self.resource}_CONFLICT",
                    "message": f"{self.resource.replace('_', ' ').capitalize()} conflicts with an existing record",
                },
            )

    def _coerce_id(self, obj_id: Any):
        column = self.columns["id"].columns[0]
        try:
            return coerce_value(column, obj_id)
        except Uncoercible:
            return None

    # ---- list normalization -----------------------------------------------

    def apply_filters(self, stmt, filters: dict[str, Any]):
        columns = self.columns
        for raw_key, value in filters.items():
            if raw_key in _SEARCH_KEYS:
                continue

            key = camel_to_snake(str(raw_key))
            op = "eq"
            if key not in columns:
                for suffix in _FILTER_OPERATORS:
                    if key.endswith(suffix) and key[: -len(suffix)] in columns:
                        key, op = key[: -len(suffix)], suffix[1:]
                        break

            if key not in columns:
                logger.debug("Ignoring unknown filter key %r on %s", raw_key, self.resource)
                continue

            attr = getattr(self.model, key)
            column = columns[key].columns[0]

            if op == "in" or (op == "eq" and isinstance(value, list)):
                raw_items = value if isinstance(value, list) else str(value).split(",")
                items = []
                for item in raw_items:
                    try:
                        items.append(coerce_value(column, item))
                    except Uncoercible:
                        continue
                stmt = stmt.where(attr.in_(items)) if items else stmt.where(false())
                continue

            if value is None:
                stmt = stmt.where(attr.is_(None))
                continue

            if op == "contains":
                stmt = stmt.where(attr.icontains(str(value), autoescape=True))
                continue

            try:
                coerced = coerce_value(column, value)
            except Uncoercible:
                stmt = stmt.where(false())
                continue

            if op == "gte":
                stmt = stmt.where(attr >= coerced)
            elif op == "lte":
                stmt = stmt.where(attr <= coerced)
            else:
                stmt = stmt.where(attr == coerced)
        return stmt

    def apply_search(self, stmt, q: str | None):
        if not q or not self.search_fields:
            return stmt
        clauses = [getattr(self.model, f).icontains(q, autoescape=True) for f in self.search_fields]
        return stmt.where(or_(*clauses))

    def apply_sort(self, stmt, sort: Iterable[SortField]):
        columns = self.columns
        order_by = []
        seen: set[str] = set()
        for item in sort:
            key = camel_to_snake(item.field)
            if key not in columns:
                logger.warning("Unknown sort field %r on %s, using default sort", item.field, self.resource)
                continue
            if key in seen:
                continue
            seen.add(key)
            attr = getattr(self.model, key)
            order_by.append(attr.desc() if item.descending else attr.asc())

        if not order_by:
            for item in parse_sort(self.default_sort):
                if item.field in columns and item.field not in seen:
                    seen.add(item.field)
                    attr = getattr(self.model, item.field)
                    order_by.append(attr.desc() if item.descending else attr.asc())

        # Stable pagination needs a unique tiebreak.
        if "id" not in seen:
            order_by.append(self.model.id.asc())
        return stmt.order_by(*order_by)

    # ---- read --------------------------------------------------------------

    def list_query(self, params: ListParams):
        stmt = self.base_query()
        stmt = self.apply_filters(stmt, params.filter)
        stmt = self.apply_search(stmt, params.q)
        return stmt

    def get_list(self, db: Session, params: ListParams) -> tuple[list[Any], int]:
        if params.ids is not None:
            rows = self.get_many(db, params.ids)
            return rows, len(rows)

        stmt = self.list_query(params)
        total = db.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
        stmt = self.apply_sort(stmt, params.sort).offset(params.skip).limit(params.take)
        rows = list(db.execute(stmt).unique().scalars().all())
        return rows, int(total)

    def get_many(self, db: Session, ids: Iterable[Any]) -> list[Any]:
        coerced = [c for c in (self._coerce_id(i) for i in ids) if c is not None]
        if not coerced:
            return []
        stmt = self.base_query().where(self.model.id.in_(coerced)).order_by(self.model.id.asc())
        return list(db.execute(stmt).unique().scalars().all())

    def get_many_reference(
        self, db: Session, target: str, target_id: Any, params: ListParams
    ) -> tuple[list[Any], int]:
        filters = dict(params.filter)
        filters[target] = target_id
        scoped = ListParams(
            page=params.page,
            per_page=params.per_page,
            sort=params.sort,
            filter=filters,
            ids=None,
            q=params.q,
        )
        return self.get_list(db, scoped)

    def get_one(self, db: Session, obj_id: Any):
        coerced = self._coerce_id(obj_id)
        if coerced is None:
            raise self.not_found()
        obj = get_by_id(db, self.model, coerced, self.branch_id)
        if obj is None:
            raise self.not_found()
        return obj

    # ---- write -------------------------------------------------------------

    def check_references(self, db: Session, data: dict[str, Any]) -> None:
        # Cross-branch references look exactly like missing ones.
        for field_name, ref_model in self.references.items():
            ref_id = data.get(field_name)
            if ref_id is None:
                continue
            if get_by_id(db, ref_model, ref_id, self.branch_id) is None:
                ref_name = camel_to_snake(ref_model.__name__).upper()
                raise HTTPException(
                    status_code=404,
                    detail={"code": f"{ref_name}_NOT_FOUND", "message": f"{field_name} {ref_id} not found"},
                )

    def before_create(self, db: Session, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def before_delete(self, db: Session, obj) -> None:
        return None

    def after_delete(self, db: Session, obj) -> None:
        return None

    def create(self, db: Session, data: dict[str, Any]):
        data = dict(data)
        data.pop("branch_id", None)
        self.check_references(db, data)
        data = self.before_create(db, data)
        obj = self.model(**data)
        db.add(obj)
        self.commit(db)
        db.refresh(obj)
        return obj

    def update(self, db: Session, obj_id: Any, data: dict[str, Any]):
        obj = self.get_one(db, obj_id)
        data = dict(data)
        data.pop("branch_id", None)
        data.pop("id", None)
        self.check_references(db, data)
        data = self.before_update(db, obj, data)
        for k, v in data.items():
            setattr(obj, k, v)
        self.commit(db)
        db.refresh(obj)
        return obj

    def delete(self, db: Session, obj_id: Any):
        obj = self.get_one(db, obj_id)
        self.before_delete(db, obj)
        db.delete(obj)
        self.after_delete(db, obj)
        self.commit(db, code=f"{self.resource}_IN_USE")
        return obj

    def _bulk_values(self, data: dict[str, Any], schema=None) -> dict[str, Any]:
        columns = self.columns
        values: dict[str, Any] = {}
        for raw_key, raw_value in data.items():
            key = camel_to_snake(str(raw_key))
            if key in ("id", "branch_id") or key not in columns:
                continue
            try:
                values[key] = coerce_value(columns[key].columns[0], raw_value)
            except Uncoercible:
                raise HTTPException(
                    status_code=400,
                    detail={"code": "INVALID_VALUE", "message": f"Invalid value for {raw_key}"},
                )
        if schema is None:
            return values
        try:
            # Columns the update schema does not expose are dropped here.
            return schema.model_validate(values).model_dump(exclude_unset=True)
        except ValidationError as exc:
            raise RequestValidationError(exc.errors())

    def update_many(self, db: Session, ids: Iterable[Any], data: dict[str, Any], *, schema=None) -> list[str]:
        """Apply one partial update to many rows, all or nothing.

        Each row goes through `before_update` like a single PATCH, and is
        flushed before the next so later rows are checked against earlier ones.
        """

        rows = self.get_many(db, ids)
        values = self._bulk_values(data, schema)
        self.check_references(db, values)
        try:
            for obj in rows:
                row_values = self.before_update(db, obj, dict(values))
                for k, v in row_values.items():
                    setattr(obj, k, v)
                db.flush()
        except IntegrityError as exc:
            db.rollback()
            logger.info("Integrity error on bulk %s update: %s", self.resource, exc.orig)
            raise HTTPException(status_code=409, detail=f"{self.resource}_CONFLICT")
        except Exception:
            db.rollback()
            raise
        self.commit(db)
        return [str(obj.id) for obj in rows]

    def delete_many(self, db: Session, ids: Iterable[Any]) -> list[str]:
        rows = self.get_many(db, ids)
        deleted = [str(obj.id) for obj in rows]
        for obj in rows:
            self.before_delete(db, obj)
            db.delete(obj)
            self.after_delete(db, obj)
        self.commit(db, code=f"{self.resource}_IN_USE")
        return deleted
