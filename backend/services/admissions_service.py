from __future__ import annotations

import datetime as dt
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from api.tenant import where_branch
from models.application import Application
from services.crud import CrudService


REVIEWED_STATUSES = ("APPROVED", "REJECTED", "WAITLISTED")


class ApplicationService(CrudService):
    model = Application
    resource = "APPLICATION"
    search_fields = ("application_no", "applicant_first_name", "applicant_last_name", "guardian_name")
    default_sort = "-created_at"

    def next_application_no(self, db: Session, *, year: int | None = None) -> str:
        """APP<year><4-digit sequence>, continuing from the highest number issued this year."""

        prefix = f"APP{year or dt.date.today().year}"
        q = where_branch(
            select(Application.application_no)
            .where(Application.application_no.startswith(prefix, autoescape=True))
            .order_by(Application.application_no.desc())
            .limit(1),
            Application,
            self.branch_id,
        )
        latest = db.execute(q).scalar_one_or_none()
        seq = 1
        if latest:
            try:
                seq = int(latest[len(prefix):]) + 1
            except ValueError:
                seq = 1
        return f"{prefix}{seq:04d}"

    def before_create(self, db: Session, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("application_no"):
            data["application_no"] = self.next_application_no(db)
        if data.get("status") in REVIEWED_STATUSES:
            data["reviewed_at"] = dt.datetime.now(dt.timezone.utc)
        return data

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        if "application_no" in data and not data["application_no"]:
            data.pop("application_no")
        status = data.get("status")
        if status in REVIEWED_STATUSES and (status != obj.status or obj.reviewed_at is None):
            data["reviewed_at"] = dt.datetime.now(dt.timezone.utc)
        return data


application_service = ApplicationService()
