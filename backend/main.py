from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

import psycopg2
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import OperationalError as SAOperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.router import api_router
from core.bootstrap import bootstrap_schema
from core.config import settings
from core.database import ENGINE, is_transient_db_connectivity_error
from core.errors import (
    BranchScopeViolation,
    DatabaseUnavailableError,
    problem_response,
    split_http_detail,
    validation_details,
)
from core.logging import setup_logging
from core.middleware import BranchScopeMiddleware


logger = logging.getLogger(__name__)


def _status_code_name(status: int) -> str:
    try:
        return HTTPStatus(status).name
    except ValueError:
        return "ERROR"


def _db_unavailable_response(request: Request):
    return problem_response(
        503,
        code="DATABASE_UNAVAILABLE",
        detail="Database temporarily unavailable. Please retry.",
        instance=request.url.path,
    )


def _operational_error_response(request: Request, exc: Exception):
    if is_transient_db_connectivity_error(exc):
        logger.warning("Database transient connectivity error (503)", exc_info=exc)
        return _db_unavailable_response(request)
    logger.error("Database operation failed", exc_info=exc)
    return problem_response(
        500,
        code="DATABASE_ERROR",
        detail="Database operation failed.",
        instance=request.url.path,
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.should_create_schema:
        bootstrap_schema()
    yield


def create_app() -> FastAPI:
    setup_logging(environment=settings.environment)
    is_production = settings.is_production
    app = FastAPI(
        title="School Management API",
        version="0.1.0",
        docs_url=None if is_production else "/api-docs",
        redoc_url=None,
        openapi_url=None if is_production else "/api-docs/openapi.json",
        lifespan=lifespan,
    )

    @app.exception_handler(StarletteHTTPException)
    def _http_error(request: Request, exc: StarletteHTTPException):
        code, detail, errors = split_http_detail(exc.detail)
        return problem_response(
            exc.status_code,
            code=code or _status_code_name(exc.status_code),
            detail=detail,
            instance=request.url.path,
            errors=errors,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    def _validation_error(request: Request, exc: RequestValidationError):
        return problem_response(
            422,
            code="validation_error",
            detail=validation_details(exc.errors()),
            instance=request.url.path,
        )

    @app.exception_handler(IntegrityError)
    def _integrity_error(request: Request, exc: IntegrityError):
        logger.info("Unhandled integrity error on %s: %s", request.url.path, exc.orig)
        return problem_response(
            409,
            code="CONFLICT",
            detail="The request conflicts with an existing record.",
            instance=request.url.path,
        )

    @app.exception_handler(BranchScopeViolation)
    def _branch_mismatch(request: Request, exc: BranchScopeViolation):
        return problem_response(400, code="BRANCH_MISMATCH", detail=str(exc), instance=request.url.path)

    @app.exception_handler(DatabaseUnavailableError)
    def _db_unavailable(request: Request, exc: DatabaseUnavailableError):
        logger.warning("Database unavailable (503)", exc_info=exc)
        return _db_unavailable_response(request)

    @app.exception_handler(SAOperationalError)
    def _sqlalchemy_operational_error(request: Request, exc: SAOperationalError):
        return _operational_error_response(request, exc)

    @app.exception_handler(psycopg2.OperationalError)
    def _psycopg2_operational_error(request: Request, exc: Exception):
        return _operational_error_response(request, exc)

    @app.exception_handler(Exception)
    def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return problem_response(
            500,
            code="INTERNAL_ERROR",
            detail="Internal server error.",
            instance=request.url.path,
        )

    allow_origins = [settings.frontend_origin]
    allow_origin_regex = None
    if not is_production:
        # Dev-friendly: allow the configured origin and any localhost port.
        allow_origins.extend(["http://localhost:3000", "http://127.0.0.1:3000"])
        allow_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

    app.add_middleware(BranchScopeMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_origin_regex=allow_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict:
        # Always respond; reflect DB availability without crashing.
        db_status = "ok"
        try:
            with ENGINE.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            db_status = "down"

        return {"app": "ok", "database": db_status}

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
