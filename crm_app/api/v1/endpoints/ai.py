from uuid import UUID

from fastapi import APIRouter, Depends, Request

from crm_app.api.deps import get_ai_insight_service, get_current_user_id
from crm_app.core.config import settings
from crm_app.core.rate_limit import limiter
from crm_app.schemas.ai import (
    ActivitySuggestionRequest,
    CustomerInsightRequest,
    DealScoringRequest,
    EmailTemplateRequest,
    InsightResponse,
    TicketClassificationRequest,
)
from crm_app.services.ai_insight_service import AIInsightService

router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/customer-insights", response_model=InsightResponse)
@limiter.limit(settings.AI_RATE_LIMIT)
async def customer_insights(
    request: Request,
    request_body: CustomerInsightRequest,
    owner_id: UUID = Depends(get_current_user_id),
    service: AIInsightService = Depends(get_ai_insight_service),
) -> InsightResponse:
    """Patterns, opportunities, risks and next actions for a customer."""
    return await service.customer_insights(owner_id, request_body.customer_id)


@router.post("/deal-scoring", response_model=InsightResponse)
@limiter.limit(settings.AI_RATE_LIMIT)
async def deal_scoring(
    request: Request,
    request_body: DealScoringRequest,
    owner_id: UUID = Depends(get_current_user_id),
    service: AIInsightService = Depends(get_ai_insight_service),
) -> InsightResponse:
    """Closing probability, confidence, factors and a recommendation."""
    return await service.score_deal(owner_id, request_body.deal_id)


@router.post("/ticket-classification", response_model=InsightResponse)
@limiter.limit(settings.AI_RATE_LIMIT)
async def ticket_classification(
    request: Request,
    request_body: TicketClassificationRequest,
    owner_id: UUID = Depends(get_current_user_id),
    service: AIInsightService = Depends(get_ai_insight_service),
) -> InsightResponse:
    return await service.classify_ticket(owner_id, request_body)


@router.post("/email-templates", response_model=InsightResponse)
@limiter.limit(settings.AI_RATE_LIMIT)
async def email_templates(
    request: Request,
    request_body: EmailTemplateRequest,
    owner_id: UUID = Depends(get_current_user_id),
    service: AIInsightService = Depends(get_ai_insight_service),
) -> InsightResponse:
    return await service.email_template(owner_id, request_body)


@router.post("/activity-suggestions", response_model=InsightResponse)
@limiter.limit(settings.AI_RATE_LIMIT)
async def activity_suggestions(
    request: Request,
    request_body: ActivitySuggestionRequest,
    owner_id: UUID = Depends(get_current_user_id),
    service: AIInsightService = Depends(get_ai_insight_service),
) -> InsightResponse:
    """Three to five next-best actions for a customer, deal or ticket."""
    return await service.activity_suggestions(owner_id, request_body)
