from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Iterator

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings
from core.errors import BranchScopeViolation, DatabaseUnavailableError
from core.tenancy import get_current_branch_id


logger = logging.getLogger(__name__)


# Back-off between session pings; len() + 1 attempts in total.
PING_BACKOFF_SECONDS: tuple[float, ...] = (0.2, 0.5, 1.0)

# Lower-cased fragments of driver messages that mean "could not reach the server".
TRANSIENT_MARKERS: tuple[str, ...] = (
    # DNS
    "getaddrinfo failed",
    "could not translate host name",
    "name or service not known",
    # refused / reset / dropped
    "connection refused",
    "actively refused",
    "connection reset",
    "server closed the connection unexpectedly",
    # timeouts
    "timeout",
    "timed out",
)

_DRIVER_PREFIXES: dict[str, str] = {
    "postgres://": "postgresql+psycopg2://",
    "postgresql://": "postgresql+psycopg2://",
    "postgresql+psycopg://": "postgresql+psycopg2://",
}


def _exception_chain(exc: BaseException) -> Iterable[BaseException]:
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        yield cur
        cur = cur.__cause__ or cur.__context__


def is_transient_db_connectivity_error(exc: BaseException) -> bool:
    """True when `exc` (or anything it wraps) looks like a reachability failure.

    Constraint, validation and SQL errors never match.
    """

    text_blob = "\n".join(str(e).lower() for e in _exception_chain(exc))
    return any(marker in text_blob for marker in TRANSIENT_MARKERS)


def normalize_database_url(url: str) -> str:
    url = url.strip()
    for prefix, replacement in _DRIVER_PREFIXES.items():
        if url.startswith(prefix):
            return replacement + url[len(prefix):]
    return url


def _enable_sqlite_foreign_keys(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(database_url: str | None = None) -> Engine:
    url = normalize_database_url(database_url or settings.database_url)

    if not url.startswith("sqlite"):
        # connect_timeout keeps an outage from hanging requests and /health.
        return create_engine(url, pool_pre_ping=True, connect_args={"connect_timeout": 3})

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if make_url(url).database in (None, "", ":memory:"):
        # One shared connection, otherwise each pooled connection gets its own empty database.
        options["poolclass"] = StaticPool
    engine = create_engine(url, **options)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


ENGINE = get_engine()
SessionLocal = sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)


def _branch_changed(obj) -> bool:
    state = inspect(obj)
    return "branch_id" in state.attrs and state.attrs.branch_id.history.has_changes()


@event.listens_for(Session, "before_flush")
def _stamp_branch_id(session: Session, flush_context, instances) -> None:
    """Stamp new rows with the request branch and refuse writes into any other branch."""

    scope_branch = get_current_branch_id()

    for obj in session.new:
        if not hasattr(obj, "branch_id"):
            continue
        if obj.branch_id is None:
            obj.branch_id = scope_branch
        elif scope_branch is not None and str(obj.branch_id) != scope_branch:
            raise BranchScopeViolation(f"row belongs to branch {obj.branch_id!r}, request is scoped to {scope_branch!r}")

    if scope_branch is None:
        return
    for obj in session.dirty:
        if hasattr(obj, "branch_id") and _branch_changed(obj) and str(obj.branch_id) != scope_branch:
            raise BranchScopeViolation("branch_id of an existing row cannot be moved to another branch")


def _ping(db: Session) -> None:
    db.execute(text("SELECT 1"))


def _open_checked_session() -> Session:
    """A session whose connection answered SELECT 1, retrying transient failures."""

    attempts = len(PING_BACKOFF_SECONDS) + 1
    last_exc: BaseException | None = None
    for attempt in range(attempts):
        db = SessionLocal()
        try:
            _ping(db)
            return db
        except OperationalError as exc:
            db.close()
            last_exc = exc
            if not is_transient_db_connectivity_error(exc) or attempt == attempts - 1:
                break
            logger.warning("Database ping failed (attempt %s/%s), retrying", attempt + 1, attempts)
            time.sleep(PING_BACKOFF_SECONDS[attempt])
    raise DatabaseUnavailableError("Database temporarily unavailable") from last_exc


def get_db() -> Iterator[Session]:
    # Only acquisition is retried; errors raised by the endpoint (404/409/422)
    # propagate untouched.
    db = _open_checked_session()
    try:
        yield db
    finally:
        db.close()
