from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from crm_app.api.deps import get_activity_service, get_current_user_id
from crm_app.schemas.crm import ActivityCreate, ActivityOut, ActivityUpdate, DeleteResponse
from crm_app.services.record_service import ActivityService

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.get("", response_model=List[ActivityOut])
async def list_activities(
    owner_id: UUID = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
) -> List[ActivityOut]:
    return [ActivityOut.model_validate(a) for a in await service.list(owner_id)]


@router.get("/{activity_id}", response_model=ActivityOut)
async def get_activity(
    activity_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityOut:
    return ActivityOut.model_validate(await service.get(owner_id, activity_id))


@router.post("", response_model=ActivityOut, status_code=201)
async def create_activity(
    request_body: ActivityCreate,
    owner_id: UUID = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityOut:
    """Log an activity against a customer, deal and/or ticket."""
    return ActivityOut.model_validate(await service.create(owner_id, request_body))


@router.put("/{activity_id}", response_model=ActivityOut)
async def update_activity(
    activity_id: UUID,
    request_body: ActivityUpdate,
    owner_id: UUID = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityOut:
    return ActivityOut.model_validate(
        await service.update(owner_id, activity_id, request_body)
    )


@router.delete("/{activity_id}", response_model=DeleteResponse)
async def delete_activity(
    activity_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: ActivityService = Depends(get_activity_service),
) -> DeleteResponse:
    await service.delete(owner_id, activity_id)
    return DeleteResponse(message="Activity deleted successfully")
