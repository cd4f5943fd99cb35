"""Request / response schemas for the AI insight endpoints."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator
from typing_extensions import Self

from crm_app.schemas.common import InsightType, RelatedEntityType


class CustomerInsightRequest(BaseModel):
    customer_id: UUID


class DealScoringRequest(BaseModel):
    deal_id: UUID


class TicketClassificationRequest(BaseModel):
    """Classify a stored ticket, or an ad-hoc title/description pair."""

    ticket_id: Optional[UUID] = None
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None

    @model_validator(mode="after")
    def require_ticket_or_text(self) -> Self:
        if self.ticket_id is None and not (self.title or self.description):
            raise ValueError("Provide ticket_id or a title/description to classify")
        return self


class EmailTemplateRequest(BaseModel):
    scenario: str = Field(..., min_length=1, max_length=500)
    customer_id: Optional[UUID] = None
    context: Optional[str] = Field(None, max_length=2000)


class ActivitySuggestionRequest(BaseModel):
    entity_type: RelatedEntityType
    entity_id: UUID


class InsightResponse(BaseModel):
    """Result of one AI feature call, as stored in ``ai_insights``."""

    success: bool = True
    insight_id: Optional[UUID] = None
    insight_type: InsightType
    entity_type: Optional[str] = None
    entity_id: Optional[UUID] = None
    data: Any
    confidence_score: Optional[float] = None
    created_at: Optional[datetime] = None
    model: Optional[str] = None
    degraded: bool = False

