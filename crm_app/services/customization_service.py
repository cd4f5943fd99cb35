import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from crm_app.core.cache import CacheService, dashboard_key, stylesheet_key
from crm_app.core.config import settings
from crm_app.core.exceptions import CustomizationNotFoundError, PersistenceError
from crm_app.core.stylesheet import StyleSheetDocument, StyleSheetHost
from crm_app.models.customization import UICustomization
from crm_app.repositories.customization_repository import CustomizationRepository
from crm_app.schemas.customization import (
    CustomizationActionResponse,
    CustomizationListResponse,
    CustomizationOut,
    PreviewResponse,
)
from crm_app.services.customization_registry import CustomizationRegistry
from crm_app.services.preview_session import PreviewSession

logger = logging.getLogger(__name__)


class CustomizationService:
    """Apply, roll back and preview stored customizations.

    The store is written first; the stylesheet is only recompiled and
    re-cached once the commit succeeded.  Only live previews are kept in
    the process-wide host.
    """

    def __init__(
        self,
        repo: CustomizationRepository,
        host: StyleSheetHost,
        cache: CacheService | None = None,
    ) -> None:
        self._repo = repo
        self._host = host
        self._cache: CacheService = cache or CacheService()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list(self, owner_id: UUID) -> CustomizationListResponse:
        rules = await self._repo.list_by_owner(owner_id)
        return CustomizationListResponse(
            customizations=[CustomizationOut.model_validate(r) for r in rules],
            active_count=sum(1 for r in rules if r.is_active),
        )

    async def get(self, owner_id: UUID, customization_id: UUID) -> UICustomization:
        rule = await self._repo.get_for_owner(owner_id, customization_id)
        if rule is None:
            raise CustomizationNotFoundError()
        return rule

    async def stylesheet(self, owner_id: UUID) -> str:
        """Return the owner's compiled active stylesheet (cache first)."""
        cached = await self._cache.get(stylesheet_key(owner_id))
        if cached is not None:
            return cached
        css = await self._registry(owner_id).load()
        await self._store_stylesheet(owner_id, css)
        return css

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def apply(
        self, owner_id: UUID, customization_id: UUID
    ) -> CustomizationActionResponse:
        """Activate a rule; it becomes the most recently applied one."""
        rule = await self.get(owner_id, customization_id)
        registry = self._registry(owner_id)
        await registry.load()

        await self._persist(rule, active=True)
        css = registry.apply(rule)
        await self._store_stylesheet(owner_id, css)
        await self._cache.delete(dashboard_key(owner_id))

        logger.info("Applied customization %s for owner %s", rule.id, owner_id)
        return CustomizationActionResponse(
            message="Customization applied",
            customization=CustomizationOut.model_validate(rule),
            stylesheet=css,
        )

    async def rollback(
        self, owner_id: UUID, customization_id: UUID
    ) -> CustomizationActionResponse:
        """Deactivate a rule; the row and its history are kept."""
        rule = await self.get(owner_id, customization_id)
        registry = self._registry(owner_id)
        await registry.load()

        await self._persist(rule, active=False)
        css = registry.remove(rule.id)
        await self._store_stylesheet(owner_id, css)
        await self._cache.delete(dashboard_key(owner_id))

        logger.info("Rolled back customization %s for owner %s", rule.id, owner_id)
        return CustomizationActionResponse(
            message="Customization rolled back",
            customization=CustomizationOut.model_validate(rule),
            stylesheet=css,
        )

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    def preview_state(self, owner_id: UUID) -> PreviewResponse:
        document = self._host.get(owner_id)
        if document is None:
            return PreviewResponse(enabled=False)
        session = PreviewSession(document)
        return PreviewResponse(
            enabled=session.enabled,
            customization_id=session.customization_id,
            css=session.css,
        )

    async def preview(self, owner_id: UUID, customization_id: UUID) -> PreviewResponse:
        """Render one stored rule on its own, without applying it."""
        rule = await self.get(owner_id, customization_id)
        session = PreviewSession(self._host.document(owner_id))
        css = session.enable(rule)
        return PreviewResponse(enabled=True, customization_id=rule.id, css=css)

    def end_preview(self, owner_id: UUID) -> PreviewResponse:
        document = self._host.get(owner_id)
        if document is not None:
            PreviewSession(document).disable()
            self._host.release(owner_id)
        return PreviewResponse(enabled=False)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _registry(self, owner_id: UUID) -> CustomizationRegistry:
        # Rebuilt from the store per request; the result lives in Redis
        return CustomizationRegistry(owner_id, self._repo, StyleSheetDocument())

    async def _persist(self, rule: UICustomization, *, active: bool) -> None:
        try:
            await self._repo.set_active(rule, active)
            await self._repo.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to update customization %s: %s", rule.id, exc)
            await self._repo.rollback()
            raise PersistenceError("Failed to save customization") from exc

    async def _store_stylesheet(self, owner_id: UUID, css: str) -> None:
        await self._cache.set(
            stylesheet_key(owner_id), css, ttl=settings.STYLESHEET_CACHE_TTL
        )
