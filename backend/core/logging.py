from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from core.config import BACKEND_DIR
from core.tenancy import get_scope


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [branch=%(branch_id)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"
LOG_FILE = Path(BACKEND_DIR) / "logs" / "school_api.log"


class BranchScopeFilter(logging.Filter):
    """Attach the request's tenant and branch to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        scope = get_scope()
        record.branch_id = scope.branch_id or "-"
        record.tenant_id = scope.tenant_id or "-"
        return True


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    handler.addFilter(BranchScopeFilter())
    return handler


def setup_logging(*, environment: str) -> None:
    """Configure the root logger once.

    Production logs at INFO to the console and a rotating file
    (10 MB x 5 under backend/logs/); every other environment logs DEBUG to
    the console only. Later calls are no-ops.
    """

    root = logging.getLogger()
    if root.handlers:
        return

    production = (environment or "development").strip().lower() == "production"
    level = logging.INFO if production else logging.DEBUG

    handlers = [_handler(logging.StreamHandler(), level)]
    if production:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            LOG_FILE,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        handlers.append(_handler(rotating, level))

    logging.basicConfig(level=level, handlers=handlers)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    # Statement echo drowns everything else at DEBUG.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
