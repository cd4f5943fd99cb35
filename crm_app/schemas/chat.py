from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from crm_app.schemas.common import ChatRole


class ChatSessionCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)


class ChatSessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ChatMessageOut(BaseModel):
    """A single immutable conversation turn."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    session_id: UUID
    role: ChatRole
    content: str
    customization_data: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None


class ChatHistoryResponse(BaseModel):
    session: ChatSessionOut
    messages: List[ChatMessageOut]
