from uuid import UUID

from fastapi import APIRouter, Depends

from crm_app.api.deps import get_current_user_id, get_dashboard_service
from crm_app.schemas.crm import DashboardSummary
from crm_app.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardSummary)
async def get_dashboard(
    owner_id: UUID = Depends(get_current_user_id),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardSummary:
    """Counts and pipeline totals; cached per owner."""
    return await service.get_summary(owner_id)
