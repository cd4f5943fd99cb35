import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from crm_app.core.config import settings
from crm_app.core.constants import DEFAULT_SESSION_TITLE, SESSION_TITLE_MAX_LENGTH
from crm_app.core.exceptions import ChatSessionNotFoundError, PersistenceError
from crm_app.models.chat import ChatSession
from crm_app.repositories.chat_repository import ChatRepository
from crm_app.schemas.chat import ChatHistoryResponse, ChatMessageOut, ChatSessionOut

logger = logging.getLogger(__name__)


class ChatService:
    """Wizard conversation history for one owner."""

    def __init__(self, repo: ChatRepository) -> None:
        self._repo = repo

    async def list_sessions(
        self, owner_id: UUID, limit: Optional[int] = None
    ) -> List[ChatSession]:
        return await self._repo.list_recent(
            owner_id, limit or settings.CHAT_SESSION_LIST_LIMIT
        )

    async def create_session(self, owner_id: UUID, title: Optional[str] = None) -> ChatSession:
        """Start a conversation; titles are trimmed to the list width."""
        clean = (title or "").strip()[:SESSION_TITLE_MAX_LENGTH] or DEFAULT_SESSION_TITLE
        try:
            session = await self._repo.create(owner_id, title=clean)
            await self._repo.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to create chat session for owner %s: %s", owner_id, exc)
            await self._repo.rollback()
            raise PersistenceError("Failed to create chat session") from exc
        return session

    async def history(self, owner_id: UUID, session_id: UUID) -> ChatHistoryResponse:
        session = await self._repo.get_for_owner(owner_id, session_id)
        if session is None:
            raise ChatSessionNotFoundError()
        messages = await self._repo.list_messages(session_id)
        return ChatHistoryResponse(
            session=ChatSessionOut.model_validate(session),
            messages=[ChatMessageOut.model_validate(m) for m in messages],
        )

    async def delete_session(self, owner_id: UUID, session_id: UUID) -> None:
        """Delete a conversation and, by cascade, all of its turns."""
        try:
            deleted = await self._repo.delete_for_owner(owner_id, session_id)
            if not deleted:
                raise ChatSessionNotFoundError()
            await self._repo.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to delete chat session %s: %s", session_id, exc)
            await self._repo.rollback()
            raise PersistenceError("Failed to delete chat session") from exc
