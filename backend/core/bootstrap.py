from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

import models  # noqa: F401  (registers every table on Base.metadata)
from core.database import ENGINE
from models.base import Base


logger = logging.getLogger(__name__)


def bootstrap_schema(engine: Engine | None = None) -> list[str]:
    """Create missing tables and indexes. Idempotent: existing tables are left alone.

    Returns the names of the tables that were created.
    """

    engine = engine or ENGINE
    existing = set(inspect(engine).get_table_names())
    Base.metadata.create_all(bind=engine, checkfirst=True)
    created = sorted(t for t in Base.metadata.tables if t not in existing)
    if created:
        logger.info("Created %s tables: %s", len(created), ", ".join(created))
    else:
        logger.debug("Schema already up to date")
    return created
