import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from crm_app.core.exceptions import PersistenceError
from crm_app.models.user_settings import UserSettings
from crm_app.repositories.user_settings_repository import UserSettingsRepository
from crm_app.schemas.settings import UserSettingsOut, UserSettingsUpdate

logger = logging.getLogger(__name__)


def _to_out(row: UserSettings | None) -> UserSettingsOut:
    if row is None:
        return UserSettingsOut()
    return UserSettingsOut(
        ai_features_enabled=bool(row.ai_features_enabled),
        has_api_key=bool(row.openai_api_key),
        usage_count=row.usage_count or 0,
        last_used_at=row.last_used_at,
    )


class SettingsService:
    """Per-owner AI settings.  The API key is never echoed back."""

    def __init__(self, repo: UserSettingsRepository) -> None:
        self._repo = repo

    async def get(self, owner_id: UUID) -> UserSettingsOut:
        return _to_out(await self._repo.get_by_owner(owner_id))

    async def update(self, owner_id: UUID, data: UserSettingsUpdate) -> UserSettingsOut:
        try:
            row = await self._repo.get_or_create(owner_id)
            if data.ai_features_enabled is not None:
                row.ai_features_enabled = data.ai_features_enabled
            if data.openai_api_key is not None:
                row.openai_api_key = data.openai_api_key.strip() or None
            await self._repo.flush()
            await self._repo.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to update settings for owner %s: %s", owner_id, exc)
            await self._repo.rollback()
            raise PersistenceError("Failed to save settings") from exc
        logger.info("Updated AI settings for owner %s", owner_id)
        return _to_out(row)
