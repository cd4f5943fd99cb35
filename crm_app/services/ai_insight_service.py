"""AI insight features: customer analysis, deal scoring, ticket
classification, email templates and next-action suggestions.

Each feature gathers a small JSON context about one CRM record, sends it
to the text-generation client with a fixed instruction, stores the
result in ``ai_insights`` and counts one unit of AI usage for the owner.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from crm_app.core.constants import CONFIDENCE_SCORES
from crm_app.core.exceptions import (
    CustomerNotFoundError,
    DealNotFoundError,
    PersistenceError,
    TicketNotFoundError,
)
from crm_app.repositories.activity_repository import ActivityRepository
from crm_app.repositories.customer_repository import CustomerRepository
from crm_app.repositories.deal_repository import DealRepository
from crm_app.repositories.insight_repository import InsightRepository
from crm_app.repositories.ticket_repository import TicketRepository
from crm_app.repositories.user_settings_repository import UserSettingsRepository
from crm_app.schemas.ai import (
    ActivitySuggestionRequest,
    EmailTemplateRequest,
    InsightResponse,
    TicketClassificationRequest,
)
from crm_app.schemas.common import InsightType, RelatedEntityType
from crm_app.services.llm_client import TextGenerationClient, resolve_api_key
from crm_app.services.reply_parser import extract_json_payload

logger = logging.getLogger(__name__)

ClientBuilder = Callable[[str], TextGenerationClient]

_RECENT_ACTIVITY_LIMIT = 10
_RECENT_ACTIVITY_DAYS = 7


@dataclass(frozen=True)
class InsightFeature:
    """Fixed parameters of one AI feature."""

    insight_type: InsightType
    instruction: str
    temperature: float
    max_tokens: int
    json_response: bool = True
    confidence_score: Optional[float] = None


FEATURES: Dict[InsightType, InsightFeature] = {
    InsightType.customer_analysis: InsightFeature(
        insight_type=InsightType.customer_analysis,
        instruction=(
            "You are a CRM assistant that analyzes customer data and provides "
            "actionable insights. Focus on patterns, opportunities, risks, and "
            "recommendations."
        ),
        temperature=0.7,
        max_tokens=500,
        json_response=False,
        confidence_score=0.85,
    ),
    InsightType.deal_scoring: InsightFeature(
        insight_type=InsightType.deal_scoring,
        instruction=(
            "You are a sales analytics AI that scores deal probability. Analyze "
            "the deal data and return JSON with: probability (0-100), confidence "
            "(low|medium|high), factors (array of strings explaining key "
            "factors), and recommendation (string with actionable advice)."
        ),
        temperature=0.5,
        max_tokens=400,
    ),
    InsightType.ticket_classification: InsightFeature(
        insight_type=InsightType.ticket_classification,
        instruction=(
            "You are a support ticket classification AI. Analyze the ticket and "
            "return JSON with: priority (low|medium|high|urgent), suggestedStatus "
            "(new|in_progress|pending|resolved|closed), reasoning (string "
            "explaining the classification), and category (string like "
            '"technical", "billing", "feature_request", etc.).'
        ),
        temperature=0.3,
        max_tokens=300,
        confidence_score=0.85,
    ),
    InsightType.email_template: InsightFeature(
        insight_type=InsightType.email_template,
        instruction=(
            "You are a professional email template generator for CRM. Create "
            "personalized, professional emails based on the scenario. Return "
            'JSON with "subject" and "body" fields. Keep emails concise and '
            "actionable."
        ),
        temperature=0.7,
        max_tokens=500,
        confidence_score=0.90,
    ),
    InsightType.activity_suggestions: InsightFeature(
        insight_type=InsightType.activity_suggestions,
        instruction=(
            "You are a CRM assistant that suggests next best actions. Provide "
            "3-5 specific, actionable suggestions based on the context. Return "
            'a JSON object {"suggestions": [...]} whose items contain: type '
            "(call|email|task|meeting), subject (string), and reason (string)."
        ),
        temperature=0.8,
        max_tokens=400,
        confidence_score=0.80,
    ),
}


def _as_json(context: Dict[str, Any]) -> str:
    return json.dumps(context, indent=2, default=str)


def _activity_context(activities: Iterable[Any]) -> List[Dict[str, Any]]:
    return [
        {
            "type": a.type,
            "subject": a.subject,
            "completed": a.completed,
            "due_date": a.due_date,
            "created_at": a.created_at,
        }
        for a in activities
    ]


def _days_since(moment: Optional[datetime], now: datetime) -> Optional[int]:
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (now - moment).days


class AIInsightService:
    def __init__(
        self,
        *,
        settings_repo: UserSettingsRepository,
        insight_repo: InsightRepository,
        customer_repo: CustomerRepository,
        deal_repo: DealRepository,
        ticket_repo: TicketRepository,
        activity_repo: ActivityRepository,
        client_builder: Optional[ClientBuilder] = None,
    ) -> None:
        self._settings_repo = settings_repo
        self._insight_repo = insight_repo
        self._customer_repo = customer_repo
        self._deal_repo = deal_repo
        self._ticket_repo = ticket_repo
        self._activity_repo = activity_repo
        self._client_builder: ClientBuilder = client_builder or TextGenerationClient

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    async def customer_insights(self, owner_id: UUID, customer_id: UUID) -> InsightResponse:
        client = await self._client(owner_id)
        customer = await self._customer_repo.get_for_owner(owner_id, customer_id)
        if customer is None:
            raise CustomerNotFoundError()

        deals = await self._deal_repo.list_for_customer(owner_id, customer_id)
        activities = await self._activity_repo.list_for_entity(
            owner_id, RelatedEntityType.customer.value, customer_id
        )
        context = {
            "customer": {
                "name": customer.name,
                "email": customer.email,
                "phone": customer.phone,
                "company": customer.company,
                "status": customer.status,
                "tags": customer.tags,
                "custom_fields": customer.custom_fields,
            },
            "deals": [
                {
                    "title": d.title,
                    "value": d.value,
                    "stage": d.stage,
                    "probability": d.probability,
                }
                for d in deals
            ],
            "activities": _activity_context(activities),
        }
        prompt = (
            f"Analyze this customer data and provide insights:\n\n{_as_json(context)}"
            "\n\nProvide:\n1. Key patterns and trends\n"
            "2. Opportunities for upselling or engagement\n"
            "3. Potential risks or concerns\n4. Recommended next actions"
        )

        feature = FEATURES[InsightType.customer_analysis]
        text, model = await self._ask(client, feature, prompt)
        data = {
            "insights": text,
            "summary": {"totalDeals": len(deals), "totalActivities": len(activities)},
        }
        return await self._store(
            owner_id,
            feature,
            data=data,
            entity_type=RelatedEntityType.customer.value,
            entity_id=customer_id,
            model=model,
        )

    async def score_deal(self, owner_id: UUID, deal_id: UUID) -> InsightResponse:
        client = await self._client(owner_id)
        deal = await self._deal_repo.get_for_owner(owner_id, deal_id)
        if deal is None:
            raise DealNotFoundError()

        customer = None
        if deal.customer_id is not None:
            customer = await self._customer_repo.get_for_owner(owner_id, deal.customer_id)
        activities = await self._activity_repo.list_for_entity(
            owner_id, RelatedEntityType.deal.value, deal_id
        )

        now = datetime.now(timezone.utc)
        recent = [
            a
            for a in activities
            if (_days_since(a.created_at, now) or 0) <= _RECENT_ACTIVITY_DAYS
        ]
        context = {
            "deal": {
                "title": deal.title,
                "value": deal.value,
                "stage": deal.stage,
                "probability": deal.probability,
                "expected_close_date": deal.expected_close_date,
                "created_at": deal.created_at,
            },
            "customer": (
                {
                    "name": customer.name,
                    "company": customer.company,
                    "status": customer.status,
                }
                if customer is not None
                else None
            ),
            "activities": _activity_context(activities),
            "metrics": {
                "daysOpen": _days_since(deal.created_at, now),
                "activityCount": len(activities),
                "recentActivityCount": len(recent),
            },
        }
        prompt = (
            f"Score this deal's probability of closing:\n\n{_as_json(context)}\n\n"
            "Consider: deal stage, value, time open, activity frequency, customer "
            "status, and expected close date."
        )

        feature = FEATURES[InsightType.deal_scoring]
        text, model = await self._ask(client, feature, prompt)
        scoring, degraded = self._decode_object(text)
        confidence = str(scoring.get("confidence", "")).lower()
        return await self._store(
            owner_id,
            feature,
            data=scoring,
            entity_type=RelatedEntityType.deal.value,
            entity_id=deal_id,
            model=model,
            degraded=degraded,
            confidence_score=CONFIDENCE_SCORES.get(confidence, CONFIDENCE_SCORES["low"]),
        )

    async def classify_ticket(
        self, owner_id: UUID, request: TicketClassificationRequest
    ) -> InsightResponse:
        client = await self._client(owner_id)
        title, description = request.title, request.description
        if request.ticket_id is not None:
            ticket = await self._ticket_repo.get_for_owner(owner_id, request.ticket_id)
            if ticket is None:
                raise TicketNotFoundError()
            title, description = ticket.title, ticket.description

        context = {"title": title, "description": description}
        prompt = (
            f"Classify this support ticket:\n\n{_as_json(context)}\n\n"
            "Determine the priority level, suggested status, category, and "
            "explain your reasoning."
        )

        feature = FEATURES[InsightType.ticket_classification]
        text, model = await self._ask(client, feature, prompt)
        classification, degraded = self._decode_object(text)
        return await self._store(
            owner_id,
            feature,
            data=classification,
            entity_type=(
                RelatedEntityType.ticket.value if request.ticket_id is not None else None
            ),
            entity_id=request.ticket_id,
            model=model,
            degraded=degraded,
        )

    async def email_template(
        self, owner_id: UUID, request: EmailTemplateRequest
    ) -> InsightResponse:
        client = await self._client(owner_id)
        customer = None
        if request.customer_id is not None:
            # A missing customer only costs the personalisation
            customer = await self._customer_repo.get_for_owner(
                owner_id, request.customer_id
            )

        context = {
            "scenario": request.scenario,
            "customer": (
                {
                    "name": customer.name,
                    "company": customer.company,
                    "email": customer.email,
                }
                if customer is not None
                else None
            ),
            "additionalContext": request.context,
        }
        prompt = (
            f"Generate an email template for this scenario:\n\n{_as_json(context)}"
            "\n\nMake it professional, personalized, and include placeholders "
            "like [CUSTOMER_NAME] if customer data is not provided."
        )

        feature = FEATURES[InsightType.email_template]
        text, model = await self._ask(client, feature, prompt)
        template, degraded = self._decode_object(text)
        return await self._store(
            owner_id,
            feature,
            data={"template": template},
            stored_data={"scenario": request.scenario, "template": template},
            entity_type=(
                RelatedEntityType.customer.value if customer is not None else None
            ),
            entity_id=customer.id if customer is not None else None,
            model=model,
            degraded=degraded,
        )

    async def activity_suggestions(
        self, owner_id: UUID, request: ActivitySuggestionRequest
    ) -> InsightResponse:
        client = await self._client(owner_id)
        entity_type = request.entity_type.value
        entity = await self._load_entity(owner_id, request.entity_type, request.entity_id)
        activities = await self._activity_repo.list_for_entity(
            owner_id, entity_type, request.entity_id
        )

        context = {
            "entityType": entity_type,
            "entity": entity,
            "recentActivities": _activity_context(activities[:_RECENT_ACTIVITY_LIMIT]),
        }
        prompt = (
            f"Based on this {entity_type} data and recent activities, suggest next "
            f"best actions:\n\n{_as_json(context)}"
        )

        feature = FEATURES[InsightType.activity_suggestions]
        text, model = await self._ask(client, feature, prompt)
        payload = extract_json_payload(text)
        degraded = False
        if isinstance(payload, list):
            suggestions = payload
        elif isinstance(payload, dict) and isinstance(payload.get("suggestions"), list):
            suggestions = payload["suggestions"]
        else:
            logger.warning("Activity suggestions reply was not a suggestion list")
            suggestions, degraded = [], True
        return await self._store(
            owner_id,
            feature,
            data={"suggestions": suggestions},
            entity_type=entity_type,
            entity_id=request.entity_id,
            model=model,
            degraded=degraded,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _client(self, owner_id: UUID) -> TextGenerationClient:
        api_key = await resolve_api_key(owner_id, self._settings_repo)
        return self._client_builder(api_key)

    async def _ask(
        self, client: TextGenerationClient, feature: InsightFeature, prompt: str
    ) -> tuple:
        completion = await client.complete(
            [
                {"role": "system", "content": feature.instruction},
                {"role": "user", "content": prompt},
            ],
            json_response=feature.json_response,
            temperature=feature.temperature,
            max_tokens=feature.max_tokens,
        )
        return completion.text, completion.model

    @staticmethod
    def _decode_object(text: str) -> tuple:
        """Return ``(payload, degraded)``; non-object replies are kept raw."""
        payload = extract_json_payload(text)
        if isinstance(payload, dict):
            return payload, False
        logger.warning("Model reply was not a JSON object; storing raw text")
        return {"raw": text}, True

    async def _load_entity(
        self, owner_id: UUID, entity_type: RelatedEntityType, entity_id: UUID
    ) -> Dict[str, Any]:
        if entity_type is RelatedEntityType.customer:
            customer = await self._customer_repo.get_for_owner(owner_id, entity_id)
            if customer is None:
                raise CustomerNotFoundError()
            return {
                "name": customer.name,
                "company": customer.company,
                "status": customer.status,
                "tags": customer.tags,
            }
        if entity_type is RelatedEntityType.deal:
            deal = await self._deal_repo.get_for_owner(owner_id, entity_id)
            if deal is None:
                raise DealNotFoundError()
            return {
                "title": deal.title,
                "value": deal.value,
                "stage": deal.stage,
                "probability": deal.probability,
                "expected_close_date": deal.expected_close_date,
            }
        ticket = await self._ticket_repo.get_for_owner(owner_id, entity_id)
        if ticket is None:
            raise TicketNotFoundError()
        return {
            "title": ticket.title,
            "description": ticket.description,
            "status": ticket.status,
            "priority": ticket.priority,
        }

    async def _store(
        self,
        owner_id: UUID,
        feature: InsightFeature,
        *,
        data: Any,
        entity_type: Optional[str],
        entity_id: Optional[UUID],
        model: str,
        degraded: bool = False,
        stored_data: Any = None,
        confidence_score: Optional[float] = None,
    ) -> InsightResponse:
        score = confidence_score if confidence_score is not None else feature.confidence_score
        try:
            insight = await self._insight_repo.record(
                owner_id,
                insight_type=feature.insight_type.value,
                insight_data=stored_data if stored_data is not None else data,
                entity_type=entity_type,
                entity_id=entity_id,
                confidence_score=score,
            )
            await self._settings_repo.record_usage(owner_id)
            await self._insight_repo.commit()
        except SQLAlchemyError as exc:
            logger.error(
                "Failed to store %s insight for owner %s: %s",
                feature.insight_type.value,
                owner_id,
                exc,
            )
            await self._insight_repo.rollback()
            raise PersistenceError("Failed to save AI insight") from exc

        logger.info(
            "Stored %s insight %s (model %s)", feature.insight_type.value, insight.id, model
        )
        return InsightResponse(
            insight_id=insight.id,
            insight_type=feature.insight_type,
            entity_type=entity_type,
            entity_id=entity_id,
            data=data,
            confidence_score=score,
            created_at=insight.created_at,
            model=model,
            degraded=degraded,
        )
