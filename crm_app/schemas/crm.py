"""Customer, deal, ticket and activity schemas."""

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from crm_app.schemas.common import (
    ActivityType,
    DealStage,
    TicketPriority,
    TicketStatus,
)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    company: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    status: str = Field("active", max_length=50)
    tags: List[str] = Field(default_factory=list)
    custom_fields: Dict[str, Any] = Field(default_factory=dict)


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    company: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    status: Optional[str] = Field(None, max_length=50)
    tags: Optional[List[str]] = None
    custom_fields: Optional[Dict[str, Any]] = None


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None
    custom_fields: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Deals
# ---------------------------------------------------------------------------


class DealCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    customer_id: Optional[UUID] = None
    description: Optional[str] = None
    value: float = Field(..., ge=0)
    stage: DealStage = DealStage.lead
    expected_close_date: Optional[date] = None
    probability: int = Field(50, ge=0, le=100)


class DealUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    customer_id: Optional[UUID] = None
    description: Optional[str] = None
    value: Optional[float] = Field(None, ge=0)
    stage: Optional[DealStage] = None
    expected_close_date: Optional[date] = None
    probability: Optional[int] = Field(None, ge=0, le=100)


class DealOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    value: float
    stage: str
    expected_close_date: Optional[date] = None
    probability: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Tickets
# ---------------------------------------------------------------------------


class TicketCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    customer_id: Optional[UUID] = None
    description: Optional[str] = None
    status: TicketStatus = TicketStatus.new
    priority: TicketPriority = TicketPriority.medium


class TicketUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    customer_id: Optional[UUID] = None
    description: Optional[str] = None
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None


class TicketOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------------


class ActivityCreate(BaseModel):
    type: ActivityType
    subject: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    customer_id: Optional[UUID] = None
    deal_id: Optional[UUID] = None
    ticket_id: Optional[UUID] = None
    due_date: Optional[datetime] = None
    completed: bool = False


class ActivityUpdate(BaseModel):
    type: Optional[ActivityType] = None
    subject: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    customer_id: Optional[UUID] = None
    deal_id: Optional[UUID] = None
    ticket_id: Optional[UUID] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: str
    subject: str
    description: Optional[str] = None
    customer_id: Optional[UUID] = None
    deal_id: Optional[UUID] = None
    ticket_id: Optional[UUID] = None
    due_date: Optional[datetime] = None
    completed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DeleteResponse(BaseModel):
    success: bool = True
    message: str


class DashboardSummary(BaseModel):
    total_customers: int = 0
    total_deals: int = 0
    open_deals: int = 0
    pipeline_value: float = 0.0
    won_value: float = 0.0
    open_tickets: int = 0
    urgent_tickets: int = 0
    pending_activities: int = 0
    active_customizations: int = 0
