from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class RequestScope:
    tenant_id: str | None = None
    branch_id: str | None = None


_EMPTY_SCOPE = RequestScope()

current_scope: ContextVar[RequestScope] = ContextVar("current_scope", default=_EMPTY_SCOPE)


def set_scope(scope: RequestScope | None) -> None:
    current_scope.set(scope or _EMPTY_SCOPE)


def get_scope() -> RequestScope:
    return current_scope.get()


def get_current_branch_id() -> str | None:
    return current_scope.get().branch_id


@contextmanager
def scope_context(*, tenant_id: str | None = None, branch_id: str | None = None) -> Iterator[RequestScope]:
    """Run a block inside a branch scope, restoring the previous scope afterwards."""

    scope = RequestScope(tenant_id=tenant_id or None, branch_id=branch_id or None)
    token = current_scope.set(scope)
    try:
        yield scope
    finally:
        current_scope.reset(token)
