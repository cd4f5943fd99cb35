from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update

from crm_app.models.user_settings import UserSettings
from crm_app.repositories.base import BaseRepository


class UserSettingsRepository(BaseRepository):
    """Encapsulates queries against the ``user_settings`` table."""

    async def get_by_owner(self, owner_id: UUID) -> Optional[UserSettings]:
        result = await self._db.execute(
            select(UserSettings).where(UserSettings.user_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, owner_id: UUID) -> UserSettings:
        row = await self.get_by_owner(owner_id)
        if row is None:
            row = UserSettings(user_id=owner_id, ai_features_enabled=False, usage_count=0)
            self._db.add(row)
            await self._db.flush()
            await self._db.refresh(row)
        return row

    async def record_usage(self, owner_id: UUID) -> None:
        """Increment the AI usage counter atomically."""
        now = datetime.now(timezone.utc)
        await self._db.execute(
            update(UserSettings)
            .where(UserSettings.user_id == owner_id)
            .values(
                usage_count=UserSettings.usage_count + 1,
                last_used_at=now,
                updated_at=now,
            )
        )
