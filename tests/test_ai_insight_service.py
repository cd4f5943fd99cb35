import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from crm_app.core.exceptions import (
    CustomerNotFoundError,
    DealNotFoundError,
    PersistenceError,
    TicketNotFoundError,
)
from crm_app.schemas.ai import (
    ActivitySuggestionRequest,
    EmailTemplateRequest,
    TicketClassificationRequest,
)
from crm_app.schemas.common import InsightType, RelatedEntityType
from crm_app.services.ai_insight_service import AIInsightService
from crm_app.services.llm_client import Completion


def _customer(**overrides):
    data = dict(
        id=uuid4(),
        name="Acme Corp",
        email="ops@acme.com",
        phone="+1 555 0100",
        company="Acme",
        status="active",
        tags=["enterprise"],
        custom_fields={},
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def _deal(**overrides):
    data = dict(
        id=uuid4(),
        customer_id=None,
        title="Renewal",
        value=12000,
        stage="Proposal",
        probability=60,
        expected_close_date=None,
        created_at=datetime.now(timezone.utc) - timedelta(days=10),
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def _activity(days_ago=1):
    return SimpleNamespace(
        type="call",
        subject="Follow up",
        completed=False,
        due_date=None,
        created_at=datetime.now(timezone.utc) - timedelta(days=days_ago),
    )


class _Harness:
    def __init__(self, settings_repo, reply: str):
        self.settings_repo = settings_repo
        self.client = SimpleNamespace(
            complete=AsyncMock(return_value=Completion(text=reply, model="gpt-5-mini"))
        )
        self.insight_repo = AsyncMock()
        self.insight_repo.record = AsyncMock(
            return_value=SimpleNamespace(id=uuid4(), created_at=datetime.now(timezone.utc))
        )
        self.customer_repo = AsyncMock()
        self.customer_repo.get_for_owner = AsyncMock(return_value=None)
        self.deal_repo = AsyncMock()
        self.deal_repo.get_for_owner = AsyncMock(return_value=None)
        self.deal_repo.list_for_customer = AsyncMock(return_value=[])
        self.ticket_repo = AsyncMock()
        self.ticket_repo.get_for_owner = AsyncMock(return_value=None)
        self.activity_repo = AsyncMock()
        self.activity_repo.list_for_entity = AsyncMock(return_value=[])
        self.service = AIInsightService(
            settings_repo=settings_repo,
            insight_repo=self.insight_repo,
            customer_repo=self.customer_repo,
            deal_repo=self.deal_repo,
            ticket_repo=self.ticket_repo,
            activity_repo=self.activity_repo,
            client_builder=lambda api_key: self.client,
        )

    @property
    def call_kwargs(self):
        return self.client.complete.await_args.kwargs

    @property
    def recorded(self):
        return self.insight_repo.record.await_args.kwargs


class TestCustomerInsights:
    @pytest.mark.asyncio
    async def test_plain_text_insight_with_summary(self, owner_id, settings_repo):
        h = _Harness(settings_repo, "1. Loyal customer\n2. Upsell support plan")
        customer = _customer()
        h.customer_repo.get_for_owner.return_value = customer
        h.deal_repo.list_for_customer.return_value = [_deal(), _deal()]
        h.activity_repo.list_for_entity.return_value = [_activity()]

        result = await h.service.customer_insights(owner_id, customer.id)

        assert result.insight_type == InsightType.customer_analysis
        assert result.data["insights"].startswith("1. Loyal customer")
        assert result.data["summary"] == {"totalDeals": 2, "totalActivities": 1}
        assert result.confidence_score == 0.85
        assert result.entity_type == "customer"
        assert h.call_kwargs["json_response"] is False
        assert h.call_kwargs["temperature"] == 0.7
        settings_repo.record_usage.assert_awaited_once_with(owner_id)
        h.insight_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_customer(self, owner_id, settings_repo):
        h = _Harness(settings_repo, "unused")
        with pytest.raises(CustomerNotFoundError):
            await h.service.customer_insights(owner_id, uuid4())
        h.client.complete.assert_not_awaited()


class TestDealScoring:
    @pytest.mark.asyncio
    async def test_confidence_label_maps_to_score(self, owner_id, settings_repo):
        reply = json.dumps(
            {
                "probability": 72,
                "confidence": "High",
                "factors": ["Active engagement"],
                "recommendation": "Send the proposal",
            }
        )
        h = _Harness(settings_repo, reply)
        deal = _deal(customer_id=uuid4())
        h.deal_repo.get_for_owner.return_value = deal
        h.customer_repo.get_for_owner.return_value = _customer()
        h.activity_repo.list_for_entity.return_value = [_activity(1), _activity(30)]

        result = await h.service.score_deal(owner_id, deal.id)

        assert result.data["probability"] == 72
        assert result.confidence_score == 0.90
        assert result.degraded is False
        assert h.call_kwargs["json_response"] is True
        assert h.call_kwargs["max_tokens"] == 400
        prompt = h.client.complete.await_args.args[0][1]["content"]
        assert '"recentActivityCount": 1' in prompt

    @pytest.mark.asyncio
    async def test_unparseable_score_is_stored_raw(self, owner_id, settings_repo):
        h = _Harness(settings_repo, "I think it will probably close")
        deal = _deal()
        h.deal_repo.get_for_owner.return_value = deal

        result = await h.service.score_deal(owner_id, deal.id)

        assert result.degraded is True
        assert result.data == {"raw": "I think it will probably close"}
        assert result.confidence_score == 0.60

    @pytest.mark.asyncio
    async def test_unknown_deal(self, owner_id, settings_repo):
        h = _Harness(settings_repo, "{}")
        with pytest.raises(DealNotFoundError):
            await h.service.score_deal(owner_id, uuid4())


class TestTicketClassification:
    @pytest.mark.asyncio
    async def test_ad_hoc_text(self, owner_id, settings_repo):
        h = _Harness(settings_repo, '{"priority": "high", "category": "billing"}')
        request = TicketClassificationRequest(title="Charged twice")

        result = await h.service.classify_ticket(owner_id, request)

        assert result.data["category"] == "billing"
        assert result.entity_type is None
        assert h.recorded["entity_id"] is None
        assert h.call_kwargs["temperature"] == 0.3

    @pytest.mark.asyncio
    async def test_stored_ticket_text_is_used(self, owner_id, settings_repo):
        h = _Harness(settings_repo, '{"priority": "urgent"}')
        ticket = SimpleNamespace(id=uuid4(), title="Site down", description="500s")
        h.ticket_repo.get_for_owner.return_value = ticket

        result = await h.service.classify_ticket(
            owner_id, TicketClassificationRequest(ticket_id=ticket.id, title="ignored")
        )

        prompt = h.client.complete.await_args.args[0][1]["content"]
        assert "Site down" in prompt
        assert "ignored" not in prompt
        assert result.entity_type == "ticket"
        assert result.entity_id == ticket.id

    @pytest.mark.asyncio
    async def test_unknown_ticket(self, owner_id, settings_repo):
        h = _Harness(settings_repo, "{}")
        with pytest.raises(TicketNotFoundError):
            await h.service.classify_ticket(
                owner_id, TicketClassificationRequest(ticket_id=uuid4())
            )


class TestEmailTemplate:
    @pytest.mark.asyncio
    async def test_template_personalised_for_customer(self, owner_id, settings_repo):
        h = _Harness(settings_repo, '{"subject": "Hello", "body": "Hi Acme"}')
        customer = _customer()
        h.customer_repo.get_for_owner.return_value = customer

        result = await h.service.email_template(
            owner_id,
            EmailTemplateRequest(scenario="follow up", customer_id=customer.id),
        )

        assert result.data == {"template": {"subject": "Hello", "body": "Hi Acme"}}
        assert h.recorded["insight_data"] == {
            "scenario": "follow up",
            "template": {"subject": "Hello", "body": "Hi Acme"},
        }
        assert result.entity_id == customer.id
        assert result.confidence_score == 0.90

    @pytest.mark.asyncio
    async def test_missing_customer_only_drops_personalisation(
        self, owner_id, settings_repo
    ):
        h = _Harness(settings_repo, '{"subject": "Hello", "body": "Hi [CUSTOMER_NAME]"}')

        result = await h.service.email_template(
            owner_id, EmailTemplateRequest(scenario="welcome", customer_id=uuid4())
        )

        assert result.entity_type is None
        assert result.entity_id is None


class TestActivitySuggestions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply",
        [
            '[{"type": "call", "subject": "Check in", "reason": "Quiet week"}]',
            '{"suggestions": [{"type": "call", "subject": "Check in", "reason": "Quiet week"}]}',
        ],
    )
    async def test_list_or_wrapped_list(self, owner_id, settings_repo, reply):
        h = _Harness(settings_repo, reply)
        h.customer_repo.get_for_owner.return_value = _customer()

        result = await h.service.activity_suggestions(
            owner_id,
            ActivitySuggestionRequest(entity_type=RelatedEntityType.customer, entity_id=uuid4()),
        )

        assert result.data["suggestions"][0]["subject"] == "Check in"
        assert result.degraded is False
        assert result.confidence_score == 0.80

    @pytest.mark.asyncio
    async def test_prose_reply_degrades_to_empty_list(self, owner_id, settings_repo):
        h = _Harness(settings_repo, "Call them soon.")
        h.deal_repo.get_for_owner.return_value = _deal()

        result = await h.service.activity_suggestions(
            owner_id,
            ActivitySuggestionRequest(entity_type=RelatedEntityType.deal, entity_id=uuid4()),
        )

        assert result.data == {"suggestions": []}
        assert result.degraded is True

    @pytest.mark.asyncio
    async def test_unknown_entity(self, owner_id, settings_repo):
        h = _Harness(settings_repo, "[]")
        with pytest.raises(TicketNotFoundError):
            await h.service.activity_suggestions(
                owner_id,
                ActivitySuggestionRequest(
                    entity_type=RelatedEntityType.ticket, entity_id=uuid4()
                ),
            )


class TestInsightStorage:
    @pytest.mark.asyncio
    async def test_store_failure_rolls_back(self, owner_id, settings_repo):
        h = _Harness(settings_repo, '{"priority": "low"}')
        h.insight_repo.commit.side_effect = OperationalError("insert", {}, Exception())

        with pytest.raises(PersistenceError):
            await h.service.classify_ticket(
                owner_id, TicketClassificationRequest(title="Question")
            )
        h.insight_repo.rollback.assert_awaited_once()
