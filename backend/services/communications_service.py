from __future__ import annotations

import datetime as dt
import json
import logging
import re
import uuid
from collections import Counter
from typing import Any

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from api.tenant import get_by_id, where_branch
from models.campaign import Campaign
from models.enrollment import Enrollment
from models.message import Message
from models.section import Section
from models.staff import Staff
from models.student import Student
from models.template import Template
from models.ticket import Ticket, TicketMessage
from services.crud import CrudService


logger = logging.getLogger(__name__)


SLA_HOURS: dict[str, int] = {"urgent": 4, "high": 8, "normal": 24, "low": 48}


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def render_text(text: str | None, declared: list[str], values: dict[str, Any]) -> str | None:
    """Replace `{{ name }}` for every declared variable; missing values render empty."""

    if text is None:
        return None
    for name in declared or []:
        pattern = re.compile(r"\{\{\s*" + re.escape(str(name)) + r"\s*\}\}")
        replacement = values.get(name)
        text = pattern.sub(lambda _m: "" if replacement is None else str(replacement), text)
    return text


class TemplateService(CrudService):
    model = Template
    resource = "TEMPLATE"
    search_fields = ("name", "subject", "content")
    default_sort = "name"

    def render(self, db: Session, template_id, values: dict[str, Any]) -> dict[str, Any]:
        template = self.get_one(db, template_id)
        return {
            "subject": render_text(template.subject, template.variables, values),
            "content": render_text(template.content, template.variables, values),
        }


class CampaignService(CrudService):
    model = Campaign
    resource = "CAMPAIGN"
    search_fields = ("name",)
    default_sort = "-created_at"
    references = {"template_id": Template}

    def recipients(self, db: Session, audience_query: str | None) -> list[tuple[str, dict[str, Any]]]:
        if not audience_query:
            return []
        try:
            query = json.loads(audience_query)
        except ValueError:
            logger.warning("Campaign audience query is not valid JSON: %r", audience_query)
            return []
        if not isinstance(query, dict):
            return []

        audience = query.get("type")
        out: list[tuple[str, dict[str, Any]]] = []

        if audience == "all_students":
            q = select(Student).options(selectinload(Student.guardians)).order_by(Student.last_name, Student.id)
            for student in db.execute(where_branch(q, Student, self.branch_id)).scalars().all():
                self._add_guardian(out, student)

        elif audience == "class" and (query.get("class_id") or query.get("classId")):
            try:
                class_id = uuid.UUID(str(query.get("class_id") or query.get("classId")))
            except ValueError:
                return []
            q = (
                select(Enrollment)
                .join(Section, Section.id == Enrollment.section_id)
                .where(Section.class_id == class_id)
                .order_by(Enrollment.id)
            )
            seen: set[uuid.UUID] = set()
            for enrollment in db.execute(where_branch(q, Enrollment, self.branch_id)).scalars().all():
                if enrollment.student_id in seen:
                    continue
                seen.add(enrollment.student_id)
                self._add_guardian(out, enrollment.student)

        elif audience == "staff":
            q = select(Staff).where(Staff.status == "active").order_by(Staff.last_name, Staff.id)
            for member in db.execute(where_branch(q, Staff, self.branch_id)).scalars().all():
                if member.email:
                    out.append(
                        (
                            member.email,
                            {
                                "staff_name": f"{member.first_name} {member.last_name}",
                                "designation": member.designation,
                            },
                        )
                    )
        return out

    @staticmethod
    def _add_guardian(out: list[tuple[str, dict[str, Any]]], student: Student) -> None:
        # The first guardian on file is the primary contact.
        guardian = student.guardians[0] if student.guardians else None
        if guardian is None or not guardian.email:
            return
        out.append(
            (
                guardian.email,
                {
                    "student_name": f"{student.first_name} {student.last_name}",
                    "guardian_name": guardian.name,
                },
            )
        )

    def execute(self, db: Session, campaign_id) -> dict[str, Any]:
        campaign = self.get_one(db, campaign_id)
        template = get_by_id(db, Template, campaign.template_id, self.branch_id) if campaign.template_id else None
        if template is None:
            raise HTTPException(
                status_code=400,
                detail={"code": "CAMPAIGN_HAS_NO_TEMPLATE", "message": "Campaign has no template"},
            )

        now = _utcnow()
        count = 0
        for contact, values in self.recipients(db, campaign.audience_query):
            # Delivery is simulated: messages are recorded as sent immediately.
            db.add(
                Message(
                    campaign_id=campaign.id,
                    channel=template.channel,
                    recipient=contact,
                    subject=render_text(template.subject, template.variables, values),
                    content=render_text(template.content, template.variables, values),
                    status="sent",
                    sent_at=now,
                )
            )
            count += 1

        campaign.status = "active"
        self.commit(db)
        logger.info("Campaign %s executed with %s messages", campaign.id, count)
        return {"campaign_id": campaign.id, "status": campaign.status, "message_count": count}

    def stats(self, db: Session, campaign_id) -> dict[str, Any]:
        campaign = self.get_one(db, campaign_id)
        q = where_branch(
            select(Message.status, func.count(Message.id)).where(Message.campaign_id == campaign.id).group_by(Message.status),
            Message,
            self.branch_id,
        )
        by_status = {status: int(n) for status, n in db.execute(q).all()}
        return {"campaign_id": campaign.id, "total": sum(by_status.values()), "by_status": by_status}


class MessageService(CrudService):
    model = Message
    resource = "MESSAGE"
    search_fields = ("recipient", "subject", "content")
    default_sort = "-created_at"


class TicketService(CrudService):
    model = Ticket
    resource = "TICKET"
    search_fields = ("subject", "description", "category")
    default_sort = "-created_at"

    @staticmethod
    def sla_due(priority: str | None, *, now: dt.datetime | None = None) -> dt.datetime:
        hours = SLA_HOURS.get(priority or "normal", SLA_HOURS["normal"])
        return (now or _utcnow()) + dt.timedelta(hours=hours)

    @staticmethod
    def stamp_status(ticket: Ticket, status: str | None, *, now: dt.datetime | None = None) -> None:
        now = now or _utcnow()
        if status == "resolved" and ticket.resolved_at is None:
            ticket.resolved_at = now
        elif status == "closed":
            if ticket.closed_at is None:
                ticket.closed_at = now
            if ticket.resolved_at is None:
                ticket.resolved_at = now

    def before_create(self, db: Session, data: dict[str, Any]) -> dict[str, Any]:
        data["sla_due_at"] = self.sla_due(data.get("priority"))
        return data

    def create(self, db: Session, data: dict[str, Any]):
        ticket = super().create(db, data)
        if ticket.status in ("resolved", "closed"):
            self.stamp_status(ticket, ticket.status)
            self.commit(db)
        return ticket

    def before_update(self, db: Session, obj, data: dict[str, Any]) -> dict[str, Any]:
        if "priority" in data and data["priority"] != obj.priority:
            base = obj.created_at or _utcnow()
            if base.tzinfo is None:
                base = base.replace(tzinfo=dt.timezone.utc)
            data["sla_due_at"] = self.sla_due(data["priority"], now=base)
        if "status" in data and data["status"] != obj.status:
            self.stamp_status(obj, data["status"])
        return data

    def add_message(self, db: Session, ticket_id, data: dict[str, Any]) -> TicketMessage:
        ticket = self.get_one(db, ticket_id)
        if ticket.status == "open" and data.get("is_staff"):
            ticket.status = "in_progress"
        message = TicketMessage(
            ticket_id=ticket.id,
            author=data.get("author"),
            body=data["body"],
            is_staff=bool(data.get("is_staff")),
        )
        db.add(message)
        self.commit(db)
        db.refresh(message)
        return message

    def messages(self, db: Session, ticket_id) -> list[TicketMessage]:
        ticket = self.get_one(db, ticket_id)
        return list(ticket.messages)

    def assign(self, db: Session, ticket_id, assigned_to: str) -> Ticket:
        ticket = self.get_one(db, ticket_id)
        ticket.assigned_to = assigned_to
        if ticket.status == "open":
            ticket.status = "in_progress"
        self.commit(db)
        db.refresh(ticket)
        return ticket

    def overdue(self, db: Session, *, now: dt.datetime | None = None) -> list[Ticket]:
        q = (
            select(Ticket)
            .where(
                Ticket.sla_due_at.is_not(None),
                Ticket.sla_due_at < (now or _utcnow()),
                Ticket.status.not_in(("resolved", "closed")),
            )
            .order_by(Ticket.sla_due_at.asc(), Ticket.id)
        )
        return list(db.execute(where_branch(q, Ticket, self.branch_id)).scalars().all())

    def stats(self, db: Session) -> dict[str, Any]:
        tickets = db.execute(where_branch(select(Ticket), Ticket, self.branch_id)).scalars().all()
        by_status = Counter(t.status for t in tickets)
        by_priority = Counter(t.priority for t in tickets if t.status != "closed")
        by_category = Counter(t.category for t in tickets)
        return {
            "total": len(tickets),
            "by_status": dict(by_status),
            "by_priority": dict(by_priority),
            "by_category": dict(by_category),
        }


template_service = TemplateService()
campaign_service = CampaignService()
message_service = MessageService()
ticket_service = TicketService()
