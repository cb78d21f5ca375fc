from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.crud import register_crud_routes
from core.database import get_db
from schemas.common import ItemResponse, ListResponse
from schemas.communications import (
    CampaignCreate,
    CampaignExecuteOut,
    CampaignOut,
    CampaignStatsOut,
    CampaignUpdate,
    MessageOut,
    RenderOut,
    RenderRequest,
    TemplateCreate,
    TemplateOut,
    TemplateUpdate,
    TicketAssign,
    TicketCreate,
    TicketMessageCreate,
    TicketMessageOut,
    TicketOut,
    TicketStatsOut,
    TicketUpdate,
)
from services.communications_service import campaign_service, message_service, template_service, ticket_service


router = APIRouter()


templates = APIRouter()


@templates.post("/{template_id}/render", response_model=RenderOut)
def render_template(template_id: str, payload: RenderRequest, db: Session = Depends(get_db)) -> RenderOut:
    return RenderOut(**template_service.render(db, template_id, payload.variables))


register_crud_routes(
    templates,
    template_service,
    out_schema=TemplateOut,
    create_schema=TemplateCreate,
    update_schema=TemplateUpdate,
)


campaigns = APIRouter()


@campaigns.post("/{campaign_id}/execute", response_model=CampaignExecuteOut)
def execute_campaign(campaign_id: str, db: Session = Depends(get_db)) -> CampaignExecuteOut:
    return CampaignExecuteOut(**campaign_service.execute(db, campaign_id))


@campaigns.get("/{campaign_id}/stats", response_model=CampaignStatsOut)
def campaign_stats(campaign_id: str, db: Session = Depends(get_db)) -> CampaignStatsOut:
    return CampaignStatsOut(**campaign_service.stats(db, campaign_id))


register_crud_routes(
    campaigns,
    campaign_service,
    out_schema=CampaignOut,
    create_schema=CampaignCreate,
    update_schema=CampaignUpdate,
)


messages = APIRouter()
register_crud_routes(messages, message_service, out_schema=MessageOut, include_delete=False)


tickets = APIRouter()


@tickets.get("/overdue", response_model=ListResponse[TicketOut])
def overdue_tickets(db: Session = Depends(get_db)):
    rows = ticket_service.overdue(db)
    return {"data": [TicketOut.model_validate(t) for t in rows], "total": len(rows)}


@tickets.get("/stats", response_model=TicketStatsOut)
def ticket_stats(db: Session = Depends(get_db)) -> TicketStatsOut:
    return TicketStatsOut(**ticket_service.stats(db))


@tickets.get("/{ticket_id}/messages", response_model=ListResponse[TicketMessageOut])
def list_ticket_messages(ticket_id: str, db: Session = Depends(get_db)):
    rows = ticket_service.messages(db, ticket_id)
    return {"data": [TicketMessageOut.model_validate(m) for m in rows], "total": len(rows)}


@tickets.post("/{ticket_id}/messages", response_model=ItemResponse[TicketMessageOut], status_code=201)
def add_ticket_message(ticket_id: str, payload: TicketMessageCreate, db: Session = Depends(get_db)):
    message = ticket_service.add_message(db, ticket_id, payload.model_dump())
    return {"data": TicketMessageOut.model_validate(message)}


@tickets.post("/{ticket_id}/assign", response_model=ItemResponse[TicketOut])
def assign_ticket(ticket_id: str, payload: TicketAssign, db: Session = Depends(get_db)):
    return {"data": TicketOut.model_validate(ticket_service.assign(db, ticket_id, payload.assigned_to))}


register_crud_routes(
    tickets,
    ticket_service,
    out_schema=TicketOut,
    create_schema=TicketCreate,
    update_schema=TicketUpdate,
)


router.include_router(templates, prefix="/templates")
router.include_router(campaigns, prefix="/campaigns")
router.include_router(messages, prefix="/messages")
router.include_router(tickets, prefix="/tickets")
