from sqlalchemy import CheckConstraint, Column, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from crm_app.models._columns import (
    created_at_column,
    owner_column,
    updated_at_column,
    uuid_pk,
)
from crm_app.models.base import Base


class ChatSession(Base):
    """A UI-wizard conversation owned by one user."""

    __tablename__ = "chat_sessions"
    id = uuid_pk()
    user_id = owner_column()
    title = Column(String(200), nullable=False, server_default="New Conversation")
    created_at = created_at_column()
    updated_at = updated_at_column()

    messages = relationship(
        "ChatMessage",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ChatMessage(Base):
    """One immutable conversation turn.

    Assistant turns produced by the wizard carry the generated candidate
    in ``customization_data``.
    """

    __tablename__ = "chat_messages"
    id = uuid_pk()
    session_id = Column(
        UUID(as_uuid=True),
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    customization_data = Column(JSONB)
    created_at = created_at_column()

    session = relationship("ChatSession", back_populates="messages")

    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant')", name="ck_chat_message_role"),
    )
