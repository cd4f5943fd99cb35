from uuid import UUID

from fastapi import APIRouter, Depends, Request

from crm_app.api.deps import get_current_user_id, get_ui_wizard_service
from crm_app.core.config import settings
from crm_app.core.rate_limit import limiter
from crm_app.schemas.customization import CustomizationCandidate, WizardGenerateRequest
from crm_app.services.ui_wizard_service import UIWizardService

router = APIRouter(prefix="/ui-wizard", tags=["UI Wizard"])


@router.post("/generate", response_model=CustomizationCandidate, status_code=201)
@limiter.limit(settings.AI_RATE_LIMIT)
async def generate_customization(
    request: Request,
    request_body: WizardGenerateRequest,
    owner_id: UUID = Depends(get_current_user_id),
    service: UIWizardService = Depends(get_ui_wizard_service),
) -> CustomizationCandidate:
    """Turn a styling request into a stored, inactive customization.

    The candidate can then be previewed or applied through
    ``/customizations/{id}``.  Rate-limited per client address.
    """
    return await service.generate(
        owner_id,
        request_body.user_request,
        session_id=request_body.session_id,
    )
