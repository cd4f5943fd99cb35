import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from crm_app.core.cache import CacheService
from crm_app.core.config import settings
from crm_app.core.database import get_db
from crm_app.core.exceptions import AuthenticationRequiredError
from crm_app.core.stylesheet import StyleSheetHost

logger = logging.getLogger(__name__)

# Process-wide stylesheet resources, one document per owner
stylesheet_host = StyleSheetHost()


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> UUID:
    """Return the owner id set by the upstream auth gateway."""
    if not x_user_id:
        raise AuthenticationRequiredError()
    try:
        return UUID(x_user_id.strip())
    except ValueError:
        raise AuthenticationRequiredError("X-User-Id header is not a valid UUID")


def get_stylesheet_host() -> StyleSheetHost:
    return stylesheet_host


# ---------------------------------------------------------------------------
# Redis client factory
# ---------------------------------------------------------------------------


async def get_redis_client() -> Redis:
    """Get an async Redis client instance using connection pooling."""
    try:
        client = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
        await client.ping()
        return client
    except Exception:
        logger.warning("Redis unavailable – caching disabled for this request")
        return None  # type: ignore[return-value]


async def get_cache_service(
    redis_client: Redis = Depends(get_redis_client),
) -> CacheService:
    """Build a :class:`CacheService` backed by the shared Redis client."""
    return CacheService(redis_client=redis_client)


# ---------------------------------------------------------------------------
# Repository factory functions (one per repository, each gets the shared db)
# ---------------------------------------------------------------------------


async def get_customization_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.customization_repository import CustomizationRepository

    return CustomizationRepository(db)


async def get_chat_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.chat_repository import ChatRepository

    return ChatRepository(db)


async def get_settings_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.user_settings_repository import UserSettingsRepository

    return UserSettingsRepository(db)


async def get_customer_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.customer_repository import CustomerRepository

    return CustomerRepository(db)


async def get_deal_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.deal_repository import DealRepository

    return DealRepository(db)


async def get_ticket_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.ticket_repository import TicketRepository

    return TicketRepository(db)


async def get_activity_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.activity_repository import ActivityRepository

    return ActivityRepository(db)


async def get_insight_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.insight_repository import InsightRepository

    return InsightRepository(db)


async def get_workflow_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.workflow_repository import WorkflowRuleRepository

    return WorkflowRuleRepository(db)


async def get_dashboard_repo(
    db: AsyncSession = Depends(get_db),
):
    from crm_app.repositories.dashboard_repository import DashboardRepository

    return DashboardRepository(db)


# ---------------------------------------------------------------------------
# Service factory functions
# ---------------------------------------------------------------------------


async def get_customization_service(
    repo=Depends(get_customization_repo),
    host: StyleSheetHost = Depends(get_stylesheet_host),
    cache: CacheService = Depends(get_cache_service),
):
    """Build a :class:`CustomizationService` with injected dependencies."""
    from crm_app.services.customization_service import CustomizationService

    return CustomizationService(repo=repo, host=host, cache=cache)


async def get_ui_wizard_service(
    customization_repo=Depends(get_customization_repo),
    chat_repo=Depends(get_chat_repo),
    settings_repo=Depends(get_settings_repo),
):
    """Build a :class:`UIWizardService` with injected repositories."""
    from crm_app.services.ui_wizard_service import UIWizardService

    return UIWizardService(
        customization_repo=customization_repo,
        chat_repo=chat_repo,
        settings_repo=settings_repo,
    )


async def get_chat_service(
    repo=Depends(get_chat_repo),
):
    from crm_app.services.chat_service import ChatService

    return ChatService(repo=repo)


async def get_settings_service(
    repo=Depends(get_settings_repo),
):
    from crm_app.services.settings_service import SettingsService

    return SettingsService(repo=repo)


async def get_ai_insight_service(
    settings_repo=Depends(get_settings_repo),
    insight_repo=Depends(get_insight_repo),
    customer_repo=Depends(get_customer_repo),
    deal_repo=Depends(get_deal_repo),
    ticket_repo=Depends(get_ticket_repo),
    activity_repo=Depends(get_activity_repo),
):
    """Build an :class:`AIInsightService` with injected repositories."""
    from crm_app.services.ai_insight_service import AIInsightService

    return AIInsightService(
        settings_repo=settings_repo,
        insight_repo=insight_repo,
        customer_repo=customer_repo,
        deal_repo=deal_repo,
        ticket_repo=ticket_repo,
        activity_repo=activity_repo,
    )


async def get_customer_service(
    repo=Depends(get_customer_repo),
    cache: CacheService = Depends(get_cache_service),
):
    from crm_app.services.record_service import CustomerService

    return CustomerService(repo, cache=cache)


async def get_deal_service(
    repo=Depends(get_deal_repo),
    customer_repo=Depends(get_customer_repo),
    cache: CacheService = Depends(get_cache_service),
):
    from crm_app.services.record_service import DealService

    return DealService(repo, customer_repo, cache=cache)


async def get_ticket_service(
    repo=Depends(get_ticket_repo),
    customer_repo=Depends(get_customer_repo),
    cache: CacheService = Depends(get_cache_service),
):
    from crm_app.services.record_service import TicketService

    return TicketService(repo, customer_repo, cache=cache)


async def get_activity_service(
    repo=Depends(get_activity_repo),
    customer_repo=Depends(get_customer_repo),
    deal_repo=Depends(get_deal_repo),
    ticket_repo=Depends(get_ticket_repo),
    cache: CacheService = Depends(get_cache_service),
):
    from crm_app.services.record_service import ActivityService

    return ActivityService(repo, customer_repo, deal_repo, ticket_repo, cache=cache)


async def get_workflow_service(repo=Depends(get_workflow_repo)):
    from crm_app.services.record_service import WorkflowRuleService

    return WorkflowRuleService(repo)


async def get_dashboard_service(
    repo=Depends(get_dashboard_repo),
    cache: CacheService = Depends(get_cache_service),
):
    """Build a :class:`DashboardService` with injected dependencies."""
    from crm_app.services.dashboard_service import DashboardService

    return DashboardService(repo=repo, cache=cache)
