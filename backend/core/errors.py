from __future__ import annotations

from http import HTTPStatus
from typing import Any

from starlette.responses import JSONResponse


PROBLEM_CONTENT_TYPE = "application/problem+json"


class DatabaseUnavailableError(RuntimeError):
    """Raised when the database is temporarily unreachable (transient connectivity failure)."""


class BranchScopeViolation(ValueError):
    """Raised when a row is written with a branch other than the request's branch."""


def _title_for(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


def problem_body(
    status: int,
    *,
    code: str | None = None,
    detail: Any = None,
    instance: str | None = None,
    errors: list[str] | None = None,
    title: str | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": title or _title_for(status),
        "status": status,
        "detail": detail,
        "instance": instance,
        "code": code,
    }
    if errors:
        body["errors"] = list(errors)
    return body


def problem_response(
    status: int,
    *,
    code: str | None = None,
    detail: Any = None,
    instance: str | None = None,
    errors: list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=problem_body(status, code=code, detail=detail, instance=instance, errors=errors),
        media_type=PROBLEM_CONTENT_TYPE,
        headers=headers,
    )


def split_http_detail(detail: Any) -> tuple[str | None, Any, list[str] | None]:
    """Split an HTTPException detail into (code, human detail, errors).

    Route and service code raises either a bare code string (``"ROOM_NOT_FOUND"``)
    or a dict ``{"code": ..., "message": ..., "errors": [...]}``.
    """

    if isinstance(detail, dict):
        code = detail.get("code")
        errors = detail.get("errors")
        message = detail.get("message")
        if message is None and errors:
            message = "; ".join(str(e) for e in errors)
        return (str(code) if code else None), message, (list(errors) if errors else None)

    if isinstance(detail, str) and detail and detail.replace("_", "").isupper():
        return detail, detail.replace("_", " ").capitalize(), None

    return None, detail, None


def validation_details(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    """Aggregate pydantic/FastAPI validation errors per field."""

    out: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header")]
        field = ".".join(loc) or "request"
        out.setdefault(field, []).append(str(err.get("msg", "invalid")))
    return out
