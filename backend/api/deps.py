from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from core.config import settings
from core.security import decode_token, token_branch_ids, token_roles
from core.tenancy import get_current_branch_id
from services.list_query import ListParams, parse_list_params


logger = logging.getLogger(__name__)


bearer_scheme = HTTPBearer(auto_error=False)

# Roles that may operate on any branch.
BRANCH_ADMIN_ROLES = frozenset({"admin", "super_admin", "principal"})


def _extract_token(request: Request, creds: HTTPAuthorizationCredentials | None) -> str | None:
    if creds is not None and creds.credentials:
        return creds.credentials
    cookie_token = request.cookies.get("access_token")
    return cookie_token or None


def require_branch_access(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict | None:
    """Enforce token branch claims against X-Branch-Id.

    Only active when a JWT secret is configured and the caller sent a token.
    """

    if not settings.jwt_secret_key:
        return None
    token = _extract_token(request, creds)
    if not token:
        return None

    try:
        payload = decode_token(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    request.state.auth_payload = payload
    if BRANCH_ADMIN_ROLES.intersection(token_roles(payload)):
        return payload

    allowed = token_branch_ids(payload)
    if allowed:
        requested = (request.headers.get("x-branch-id") or "").strip()
        if not requested:
            raise HTTPException(status_code=403, detail="BRANCH_SELECTION_REQUIRED")
        if requested not in allowed:
            logger.warning("Token for sub=%s denied access to branch %s", payload.get("sub"), requested)
            raise HTTPException(status_code=403, detail="BRANCH_FORBIDDEN")
    return payload


def get_branch_id() -> str | None:
    """Branch of the current request (set by BranchScopeMiddleware)."""

    branch_id = get_current_branch_id()
    if branch_id is None and settings.require_branch:
        raise HTTPException(status_code=400, detail="BRANCH_REQUIRED")
    return branch_id


def list_params(
    page: str | None = Query(default=None),
    per_page: str | None = Query(default=None, alias="perPage"),
    page_size: str | None = Query(default=None, alias="pageSize"),
    sort: str | None = Query(default=None),
    filter: str | None = Query(default=None),
    ids: str | None = Query(default=None),
    q: str | None = Query(default=None),
) -> ListParams:
    return parse_list_params(
        page=page,
        per_page=per_page,
        page_size=page_size,
        sort=sort,
        filter=filter,
        ids=ids,
        q=q,
    )
