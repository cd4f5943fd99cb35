from uuid import UUID

from fastapi import APIRouter, Depends, Response

from crm_app.api.deps import get_current_user_id, get_customization_service
from crm_app.schemas.customization import (
    CustomizationActionResponse,
    CustomizationListResponse,
    CustomizationOut,
    PreviewResponse,
)
from crm_app.services.customization_service import CustomizationService

router = APIRouter(prefix="/customizations", tags=["Customizations"])


@router.get("", response_model=CustomizationListResponse)
async def list_customizations(
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomizationService = Depends(get_customization_service),
) -> CustomizationListResponse:
    """All of the owner's customizations, newest first."""
    return await service.list(owner_id)


@router.get("/stylesheet", response_class=Response)
async def get_stylesheet(
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomizationService = Depends(get_customization_service),
) -> Response:
    """The compiled stylesheet of every active customization."""
    css = await service.stylesheet(owner_id)
    return Response(content=css, media_type="text/css")


@router.get("/preview", response_model=PreviewResponse)
async def get_preview(
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomizationService = Depends(get_customization_service),
) -> PreviewResponse:
    return service.preview_state(owner_id)


@router.delete("/preview", response_model=PreviewResponse)
async def end_preview(
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomizationService = Depends(get_customization_service),
) -> PreviewResponse:
    """Drop the preview stylesheet; applied styling is untouched."""
    return service.end_preview(owner_id)


@router.get("/{customization_id}", response_model=CustomizationOut)
async def get_customization(
    customization_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomizationService = Depends(get_customization_service),
) -> CustomizationOut:
    rule = await service.get(owner_id, customization_id)
    return CustomizationOut.model_validate(rule)


@router.post("/{customization_id}/apply", response_model=CustomizationActionResponse)
async def apply_customization(
    customization_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomizationService = Depends(get_customization_service),
) -> CustomizationActionResponse:
    return await service.apply(owner_id, customization_id)


@router.post("/{customization_id}/rollback", response_model=CustomizationActionResponse)
async def rollback_customization(
    customization_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomizationService = Depends(get_customization_service),
) -> CustomizationActionResponse:
    """Deactivate a customization; it stays listed and can be re-applied."""
    return await service.rollback(owner_id, customization_id)


@router.post("/{customization_id}/preview", response_model=PreviewResponse)
async def preview_customization(
    customization_id: UUID,
    owner_id: UUID = Depends(get_current_user_id),
    service: CustomizationService = Depends(get_customization_service),
) -> PreviewResponse:
    """Render one customization on its own, without applying it."""
    return await service.preview(owner_id, customization_id)
