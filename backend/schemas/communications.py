from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel, Field


Channel = Literal["email", "sms", "push"]
CampaignStatus = Literal["draft", "active", "completed"]
TicketPriority = Literal["low", "normal", "high", "urgent"]
TicketStatus = Literal["open", "in_progress", "resolved", "closed"]


class TemplateBase(BaseModel):
    name: str = Field(min_length=1)
    channel: Channel = "email"
    subject: str | None = None
    content: str = Field(min_length=1)
    variables: list[str] = Field(default_factory=list)


class TemplateCreate(TemplateBase):
    pass


class TemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    channel: Channel | None = None
    subject: str | None = None
    content: str | None = Field(default=None, min_length=1)
    variables: list[str] | None = None


class TemplateOut(TemplateBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class RenderRequest(BaseModel):
    variables: dict[str, str] = Field(default_factory=dict)


class RenderOut(BaseModel):
    subject: str | None = None
    content: str


class CampaignBase(BaseModel):
    name: str = Field(min_length=1)
    template_id: uuid.UUID | None = None
    audience_query: str | None = None
    status: CampaignStatus = "draft"


class CampaignCreate(CampaignBase):
    pass


class CampaignUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    template_id: uuid.UUID | None = None
    audience_query: str | None = None
    status: CampaignStatus | None = None


class CampaignOut(CampaignBase):
    id: uuid.UUID
    branch_id: str | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class CampaignExecuteOut(BaseModel):
    campaign_id: uuid.UUID
    status: str
    message_count: int


class CampaignStatsOut(BaseModel):
    campaign_id: uuid.UUID
    total: int
    by_status: dict[str, int]


class MessageOut(BaseModel):
    id: uuid.UUID
    branch_id: str | None = None
    campaign_id: uuid.UUID | None = None
    channel: str
    recipient: str
    subject: str | None = None
    content: str
    status: str
    sent_at: dt.datetime | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class TicketBase(BaseModel):
    subject: str = Field(min_length=1)
    description: str | None = None
    category: str = "general"
    priority: TicketPriority = "normal"
    created_by: str | None = None
    assigned_to: str | None = None


class TicketCreate(TicketBase):
    status: TicketStatus = "open"


class TicketUpdate(BaseModel):
    subject: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: str | None = None
    priority: TicketPriority | None = None
    status: TicketStatus | None = None
    created_by: str | None = None
    assigned_to: str | None = None


class TicketOut(TicketBase):
    id: uuid.UUID
    branch_id: str | None = None
    status: TicketStatus
    sla_due_at: dt.datetime | None = None
    resolved_at: dt.datetime | None = None
    closed_at: dt.datetime | None = None
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class TicketMessageCreate(BaseModel):
    body: str = Field(min_length=1)
    author: str | None = None
    is_staff: bool = False


class TicketMessageOut(BaseModel):
    id: uuid.UUID
    ticket_id: uuid.UUID
    author: str | None = None
    body: str
    is_staff: bool
    created_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class TicketAssign(BaseModel):
    assigned_to: str = Field(min_length=1)


class TicketStatsOut(BaseModel):
    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]
    by_category: dict[str, int]
