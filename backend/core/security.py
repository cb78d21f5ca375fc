from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from core.config import settings


ACCESS_TOKEN_EXPIRE_MINUTES = 480


def create_access_token(
    *,
    user_id: str,
    roles: list[str] | None = None,
    branch_ids: list[str] | None = None,
    expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
) -> str:
    if not settings.jwt_secret_key:
        raise RuntimeError("JWT_SECRET_KEY is not configured")
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": user_id,
        "roles": list(roles or []),
        "branch_ids": list(branch_ids or []),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=int(expires_minutes))).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    if not settings.jwt_secret_key:
        raise RuntimeError("JWT_SECRET_KEY is not configured")
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def token_roles(payload: dict[str, Any]) -> list[str]:
    roles = payload.get("roles")
    if not isinstance(roles, list):
        return []
    return [str(r).lower() for r in roles]


def token_branch_ids(payload: dict[str, Any]) -> list[str]:
    # Accept both claim spellings issued by the identity provider.
    branch_ids = payload.get("branch_ids") or payload.get("branchIds") or []
    if not isinstance(branch_ids, list):
        return []
    return [str(b) for b in branch_ids]
