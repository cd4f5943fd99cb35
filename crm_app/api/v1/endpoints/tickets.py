from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from crm_app.api.deps import get_current_user_id, get_ticket_service
from crm_app.schemas.crm import DeleteResponse, TicketCreate, TicketOut, TicketUpdate
from crm_app.services.record_service import TicketService

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.get("", response_model=List[TicketOut])
async def list_tickets(
    owner_id: UUID = Depends(get_current_user_id),
    service: TicketService = Depends(get_ticket_service),
) -> List[TicketOut]:
    return [TicketOut.model_validate(t) for t in await service.list(owner_id)]


@router.get("/{ticket_id}", response_model=TicketOut)
async def get_ticket(
    ticket_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: TicketService = Depends(get_ticket_service),
) -> TicketOut:
    return TicketOut.model_validate(await service.get(owner_id, ticket_id))


@router.post("", response_model=TicketOut, status_code=201)
async def create_ticket(
    request_body: TicketCreate,
    owner_id: UUID = Depends(get_current_user_id),
    service: TicketService = Depends(get_ticket_service),
) -> TicketOut:
    return TicketOut.model_validate(await service.create(owner_id, request_body))


@router.put("/{ticket_id}", response_model=TicketOut)
async def update_ticket(
    ticket_id: UUID,
    request_body: TicketUpdate,
    owner_id: UUID = Depends(get_current_user_id),
    service: TicketService = Depends(get_ticket_service),
) -> TicketOut:
    """Update a ticket; ``resolved_at`` follows the status."""
    return TicketOut.model_validate(
        await service.update(owner_id, ticket_id, request_body)
    )


@router.delete("/{ticket_id}", response_model=DeleteResponse)
async def delete_ticket(
    ticket_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: TicketService = Depends(get_ticket_service),
) -> DeleteResponse:
    await service.delete(owner_id, ticket_id)
    return DeleteResponse(message="Ticket deleted successfully")
