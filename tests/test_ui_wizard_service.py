import json
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from crm_app.core.exceptions import (
    AIServiceNotConfiguredError,
    AIServiceUnavailableError,
    ChatSessionNotFoundError,
    InvalidRequestError,
    PersistenceError,
)
from crm_app.services.llm_client import Completion
from crm_app.services.ui_wizard_service import UIWizardService

GOOD_REPLY = json.dumps(
    {
        "component": "deal-card",
        "modifications": {
            "colors": {"background": "#10b981", "text": "#ffffff"},
            "theme": "neon",
        },
        "description": "Changed deal cards to vibrant green with neon effect",
        "preview": "Deal cards now glow green",
    }
)


def _fake_client(text: str, model: str = "gpt-5-mini"):
    client = SimpleNamespace()
    client.complete = AsyncMock(return_value=Completion(text=text, model=model))
    return client


def _repos():
    customization_repo = AsyncMock()

    async def _create_candidate(owner_id, **fields):
        return SimpleNamespace(id=uuid4(), user_id=owner_id, is_active=False, **fields)

    customization_repo.create_candidate = AsyncMock(side_effect=_create_candidate)
    chat_repo = AsyncMock()
    chat_repo.get_for_owner = AsyncMock(return_value=SimpleNamespace(id=uuid4()))
    return customization_repo, chat_repo


def _service(settings_repo, client, customization_repo=None, chat_repo=None):
    default_customization, default_chat = _repos()
    builder_calls = []

    def _builder(api_key):
        builder_calls.append(api_key)
        return client

    service = UIWizardService(
        customization_repo=customization_repo or default_customization,
        chat_repo=chat_repo or default_chat,
        settings_repo=settings_repo,
        client_builder=_builder,
    )
    return service, builder_calls


class TestGenerate:
    @pytest.mark.asyncio
    async def test_stores_inactive_candidate(self, owner_id, settings_repo):
        customization_repo, chat_repo = _repos()
        client = _fake_client(GOOD_REPLY)
        service, builder_calls = _service(
            settings_repo, client, customization_repo, chat_repo
        )

        candidate = await service.generate(owner_id, "  make deal cards green  ")

        assert builder_calls == ["sk-owner"]
        assert candidate.component == "deal-card"
        assert candidate.modifications["theme"] == "neon"
        assert candidate.user_request == "make deal cards green"
        assert candidate.applied is False
        assert candidate.degraded is False
        assert candidate.model == "gpt-5-mini"

        kwargs = customization_repo.create_candidate.await_args.kwargs
        assert kwargs["customization_name"] == "make deal cards green"
        assert kwargs["component_name"] == "deal-card"
        customization_repo.commit.assert_awaited_once()
        settings_repo.record_usage.assert_awaited_once_with(owner_id)
        chat_repo.add_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_request_reaches_model_with_instruction(self, owner_id, settings_repo):
        client = _fake_client(GOOD_REPLY)
        service, _ = _service(settings_repo, client)

        await service.generate(owner_id, "bigger metrics")

        messages = client.complete.await_args.args[0]
        assert messages[0]["role"] == "system"
        assert "deal-pipeline" in messages[0]["content"]
        assert '"bigger metrics"' in messages[1]["content"]

    @pytest.mark.asyncio
    async def test_session_turns_are_recorded(self, owner_id, settings_repo):
        customization_repo, chat_repo = _repos()
        session_id = uuid4()
        service, _ = _service(
            settings_repo, _fake_client(GOOD_REPLY), customization_repo, chat_repo
        )

        candidate = await service.generate(owner_id, "green cards", session_id=session_id)

        chat_repo.get_for_owner.assert_awaited_once_with(owner_id, session_id)
        assert chat_repo.add_message.await_count == 2
        user_turn, assistant_turn = chat_repo.add_message.await_args_list
        assert user_turn.args == (session_id, "user", "green cards")
        assert assistant_turn.args[1] == "assistant"
        data = assistant_turn.kwargs["customization_data"]
        assert data["id"] == str(candidate.id)
        assert data["component"] == "deal-card"
        chat_repo.touch.assert_awaited_once_with(session_id)

    @pytest.mark.asyncio
    async def test_unparseable_reply_still_yields_candidate(self, owner_id, settings_repo):
        service, _ = _service(settings_repo, _fake_client("Sure, let's make it blue"))

        candidate = await service.generate(owner_id, "make it blue")

        assert candidate.degraded is True
        assert candidate.component == "general"
        assert candidate.modifications == {"theme": "custom"}
        assert candidate.preview == "Sure, let's make it blue"

    @pytest.mark.asyncio
    async def test_blank_request_is_rejected_before_any_call(self, owner_id, settings_repo):
        client = _fake_client(GOOD_REPLY)
        service, builder_calls = _service(settings_repo, client)

        with pytest.raises(InvalidRequestError):
            await service.generate(owner_id, "   ")
        assert builder_calls == []
        settings_repo.get_by_owner.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_foreign_session_is_not_found(self, owner_id, settings_repo):
        customization_repo, chat_repo = _repos()
        chat_repo.get_for_owner.return_value = None
        client = _fake_client(GOOD_REPLY)
        service, _ = _service(settings_repo, client, customization_repo, chat_repo)

        with pytest.raises(ChatSessionNotFoundError):
            await service.generate(owner_id, "green", session_id=uuid4())
        client.complete.assert_not_awaited()
        customization_repo.create_candidate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ai_disabled_is_not_configured(self, owner_id, settings_repo):
        settings_repo.get_by_owner.return_value = SimpleNamespace(
            ai_features_enabled=False, openai_api_key="sk-owner"
        )
        service, builder_calls = _service(settings_repo, _fake_client(GOOD_REPLY))

        with pytest.raises(AIServiceNotConfiguredError):
            await service.generate(owner_id, "green")
        assert builder_calls == []

    @pytest.mark.asyncio
    async def test_model_failure_stores_nothing(self, owner_id, settings_repo):
        customization_repo, chat_repo = _repos()
        client = SimpleNamespace(
            complete=AsyncMock(side_effect=AIServiceUnavailableError("down"))
        )
        service, _ = _service(settings_repo, client, customization_repo, chat_repo)

        with pytest.raises(AIServiceUnavailableError):
            await service.generate(owner_id, "green")
        customization_repo.create_candidate.assert_not_awaited()
        settings_repo.record_usage.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_rolls_back(self, owner_id, settings_repo):
        customization_repo, chat_repo = _repos()
        customization_repo.commit.side_effect = IntegrityError("insert", {}, Exception())
        service, _ = _service(
            settings_repo, _fake_client(GOOD_REPLY), customization_repo, chat_repo
        )

        with pytest.raises(PersistenceError):
            await service.generate(owner_id, "green")
        customization_repo.rollback.assert_awaited_once()
