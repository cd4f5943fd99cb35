from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from crm_app.api.deps import get_current_user_id, get_deal_service
from crm_app.schemas.crm import DealCreate, DealOut, DealUpdate, DeleteResponse
from crm_app.services.record_service import DealService

router = APIRouter(prefix="/deals", tags=["Deals"])


@router.get("", response_model=List[DealOut])
async def list_deals(
    owner_id: UUID = Depends(get_current_user_id),
    service: DealService = Depends(get_deal_service),
) -> List[DealOut]:
    return [DealOut.model_validate(d) for d in await service.list(owner_id)]


@router.get("/{deal_id}", response_model=DealOut)
async def get_deal(
    deal_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: DealService = Depends(get_deal_service),
) -> DealOut:
    return DealOut.model_validate(await service.get(owner_id, deal_id))


@router.post("", response_model=DealOut, status_code=201)
async def create_deal(
    request_body: DealCreate,
    owner_id: UUID = Depends(get_current_user_id),
    service: DealService = Depends(get_deal_service),
) -> DealOut:
    """Create a deal; stage defaults to Lead and probability to 50."""
    return DealOut.model_validate(await service.create(owner_id, request_body))


@router.put("/{deal_id}", response_model=DealOut)
async def update_deal(
    deal_id: UUID,
    request_body: DealUpdate,
    owner_id: UUID = Depends(get_current_user_id),
    service: DealService = Depends(get_deal_service),
) -> DealOut:
    return DealOut.model_validate(await service.update(owner_id, deal_id, request_body))


@router.delete("/{deal_id}", response_model=DeleteResponse)
async def delete_deal(
    deal_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: DealService = Depends(get_deal_service),
) -> DeleteResponse:
    await service.delete(owner_id, deal_id)
    return DeleteResponse(message="Deal deleted successfully")
