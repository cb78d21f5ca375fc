from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session


def where_branch(stmt, model, branch_id: str | None):
    # No scope means no predicate: unscoped callers (scripts, requests without
    # X-Branch-Id and no default branch) see every branch.
    if branch_id is None or not hasattr(model, "branch_id"):
        return stmt
    return stmt.where(model.branch_id == branch_id)


def get_by_id(db: Session, model, obj_id: uuid.UUID | str, branch_id: str | None):
    q = select(model).where(model.id == obj_id)
    q = where_branch(q, model, branch_id)
    return db.execute(q).scalars().first()
