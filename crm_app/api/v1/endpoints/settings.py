from uuid import UUID

from fastapi import APIRouter, Depends

from crm_app.api.deps import get_current_user_id, get_settings_service
from crm_app.schemas.settings import UserSettingsOut, UserSettingsUpdate
from crm_app.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=UserSettingsOut)
async def get_settings(
    owner_id: UUID = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
) -> UserSettingsOut:
    return await service.get(owner_id)


@router.put("", response_model=UserSettingsOut)
async def update_settings(
    request_body: UserSettingsUpdate,
    owner_id: UUID = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
) -> UserSettingsOut:
    """Toggle AI features and/or store the OpenAI key (never returned)."""
    return await service.update(owner_id, request_body)
