import logging
from typing import Optional
from uuid import UUID

from crm_app.core.cache import CacheService, dashboard_key
from crm_app.core.config import settings
from crm_app.repositories.dashboard_repository import DashboardRepository
from crm_app.schemas.crm import DashboardSummary

logger = logging.getLogger(__name__)


class DashboardService:
    """Builds the per-owner dashboard summary with Redis caching.

    Writes through the record and customization services delete the
    cached entry; otherwise it expires after ``REDIS_CACHE_TTL`` seconds.
    """

    def __init__(
        self, repo: DashboardRepository, cache: Optional[CacheService] = None
    ) -> None:
        self._repo = repo
        self._cache: CacheService = cache or CacheService()

    async def get_summary(self, owner_id: UUID) -> DashboardSummary:
        key = dashboard_key(owner_id)
        cached = await self._cache.get_json(key)
        if cached is not None:
            try:
                return DashboardSummary.model_validate(cached)
            except ValueError:
                logger.warning("Discarding malformed dashboard cache for %s", owner_id)

        summary = DashboardSummary(**await self._repo.get_summary(owner_id))
        await self._cache.set_json(
            key, summary.model_dump(), ttl=settings.REDIS_CACHE_TTL
        )
        return summary
