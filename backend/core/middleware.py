from __future__ import annotations

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from core.config import settings
from core.tenancy import scope_context


class BranchScopeMiddleware:
    """Bind X-Tenant-Id / X-Branch-Id to the request's context.

    Pure ASGI so the scope is visible to everything downstream, including
    sync endpoints run in the threadpool (they inherit a copy of the context).
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        branch_id = (headers.get("x-branch-id") or "").strip() or settings.default_branch_id
        tenant_id = (headers.get("x-tenant-id") or "").strip() or None
        with scope_context(tenant_id=tenant_id, branch_id=branch_id):
            await self.app(scope, receive, send)
