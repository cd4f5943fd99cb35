from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, update

from crm_app.models.chat import ChatMessage, ChatSession
from crm_app.repositories.base import OwnedRepository


class ChatRepository(OwnedRepository[ChatSession]):
    """Wizard conversations and their turns.

    Turns are append-only; deleting a session removes its turns through
    the ``ON DELETE CASCADE`` foreign key.
    """

    model = ChatSession

    async def list_recent(self, owner_id: UUID, limit: int) -> List[ChatSession]:
        """Return the owner's sessions, most recently active first."""
        result = await self._db.execute(
            select(ChatSession)
            .where(ChatSession.user_id == owner_id)
            .order_by(ChatSession.updated_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_messages(self, session_id: UUID) -> List[ChatMessage]:
        """Return the turns of a session in chronological order."""
        result = await self._db.execute(
            select(ChatMessage)
            .where(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.created_at.asc())
        )
        return list(result.scalars().all())

    async def add_message(
        self,
        session_id: UUID,
        role: str,
        content: str,
        customization_data: Optional[Dict[str, Any]] = None,
    ) -> ChatMessage:
        message = ChatMessage(
            session_id=session_id,
            role=role,
            content=content,
            customization_data=customization_data,
        )
        self._db.add(message)
        await self._db.flush()
        return message

    async def touch(self, session_id: UUID) -> None:
        """Bump ``updated_at`` so the session sorts first in the history."""
        await self._db.execute(
            update(ChatSession)
            .where(ChatSession.id == session_id)
            .values(updated_at=datetime.now(timezone.utc))
        )
