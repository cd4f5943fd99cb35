from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from crm_app.core.exceptions import ChatSessionNotFoundError
from crm_app.services.chat_service import ChatService


def _session(owner_id, title="New Conversation"):
    now = datetime.now(timezone.utc)
    return SimpleNamespace(
        id=uuid4(), user_id=owner_id, title=title, created_at=now, updated_at=now
    )


def _repo():
    repo = AsyncMock()

    async def _create(owner_id, **fields):
        return _session(owner_id, fields["title"])

    repo.create = AsyncMock(side_effect=_create)
    repo.list_recent = AsyncMock(return_value=[])
    repo.list_messages = AsyncMock(return_value=[])
    repo.delete_for_owner = AsyncMock(return_value=True)
    return repo


class TestChatService:
    @pytest.mark.asyncio
    async def test_default_title(self, owner_id):
        session = await ChatService(_repo()).create_session(owner_id, "   ")
        assert session.title == "New Conversation"

    @pytest.mark.asyncio
    async def test_long_title_is_truncated(self, owner_id):
        session = await ChatService(_repo()).create_session(owner_id, "x" * 120)
        assert session.title == "x" * 50

    @pytest.mark.asyncio
    async def test_list_uses_configured_limit(self, owner_id):
        repo = _repo()
        with patch("crm_app.services.chat_service.settings.CHAT_SESSION_LIST_LIMIT", 7):
            await ChatService(repo).list_sessions(owner_id)
        repo.list_recent.assert_awaited_once_with(owner_id, 7)

    @pytest.mark.asyncio
    async def test_history_in_order(self, owner_id):
        repo = _repo()
        session = _session(owner_id)
        repo.get_for_owner = AsyncMock(return_value=session)
        now = datetime.now(timezone.utc)
        repo.list_messages.return_value = [
            SimpleNamespace(
                id=uuid4(),
                session_id=session.id,
                role="user",
                content="make it green",
                customization_data=None,
                created_at=now,
            ),
            SimpleNamespace(
                id=uuid4(),
                session_id=session.id,
                role="assistant",
                content="Done",
                customization_data={"component": "deal-card"},
                created_at=now,
            ),
        ]

        history = await ChatService(repo).history(owner_id, session.id)

        assert history.session.id == session.id
        assert [m.role.value for m in history.messages] == ["user", "assistant"]
        assert history.messages[1].customization_data == {"component": "deal-card"}

    @pytest.mark.asyncio
    async def test_history_of_foreign_session(self, owner_id):
        repo = _repo()
        repo.get_for_owner = AsyncMock(return_value=None)
        with pytest.raises(ChatSessionNotFoundError):
            await ChatService(repo).history(owner_id, uuid4())

    @pytest.mark.asyncio
    async def test_delete_missing_session(self, owner_id):
        repo = _repo()
        repo.delete_for_owner.return_value = False
        with pytest.raises(ChatSessionNotFoundError):
            await ChatService(repo).delete_session(owner_id, uuid4())
        repo.commit.assert_not_awaited()
