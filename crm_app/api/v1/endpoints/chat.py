from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from crm_app.api.deps import get_chat_service, get_current_user_id
from crm_app.schemas.chat import ChatHistoryResponse, ChatSessionCreate, ChatSessionOut
from crm_app.schemas.common import SuccessResponse
from crm_app.services.chat_service import ChatService

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.get("/sessions", response_model=List[ChatSessionOut])
async def list_sessions(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Max sessions to return"),
    owner_id: UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
) -> List[ChatSessionOut]:
    """Conversations, most recently active first."""
    sessions = await service.list_sessions(owner_id, limit)
    return [ChatSessionOut.model_validate(s) for s in sessions]


@router.post("/sessions", response_model=ChatSessionOut, status_code=201)
async def create_session(
    request_body: ChatSessionCreate,
    owner_id: UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
) -> ChatSessionOut:
    session = await service.create_session(owner_id, request_body.title)
    return ChatSessionOut.model_validate(session)


@router.get("/sessions/{session_id}/messages", response_model=ChatHistoryResponse)
async def get_messages(
    session_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
) -> ChatHistoryResponse:
    return await service.history(owner_id, session_id)


@router.delete("/sessions/{session_id}", response_model=SuccessResponse)
async def delete_session(
    session_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
) -> SuccessResponse:
    await service.delete_session(owner_id, session_id)
    return SuccessResponse()
