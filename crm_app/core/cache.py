import json
import logging
from typing import Any, Dict, Optional
from uuid import UUID

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

_KEY_PREFIX = "crm"


def stylesheet_key(owner_id: UUID) -> str:
    """Cache key holding the compiled active stylesheet of one owner."""
    return f"{_KEY_PREFIX}:stylesheet:{owner_id}"


def dashboard_key(owner_id: UUID) -> str:
    """Cache key holding the dashboard summary of one owner."""
    return f"{_KEY_PREFIX}:dashboard:{owner_id}"


class CacheService:
    """Per-owner read cache in front of PostgreSQL.

    Two kinds of entries live here: compiled stylesheets (plain text,
    written after every successful apply/rollback) and dashboard
    summaries (JSON, dropped on any CRM write).  Redis is optional; with
    no client, or when a command fails, reads miss and writes are skipped
    so callers always fall through to the database.
    """

    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        self._redis: Optional[Redis] = redis_client

    @property
    def is_available(self) -> bool:
        return self._redis is not None

    async def get(self, key: str) -> Optional[str]:
        if self._redis is None:
            return None
        try:
            return await self._redis.get(key)
        except Exception:
            logger.warning("Cache read failed for %s; treating as a miss", key)
            return None

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Overwrite *key*; entries with a *ttl* expire after that many seconds."""
        if self._redis is None:
            return
        try:
            if ttl:
                await self._redis.setex(key, ttl, value)
            else:
                await self._redis.set(key, value)
        except Exception:
            logger.warning("Cache write failed for %s; entry skipped", key)

    async def delete(self, *keys: str) -> None:
        """Drop one or more entries (best-effort)."""
        if self._redis is None or not keys:
            return
        try:
            await self._redis.delete(*keys)
        except Exception:
            logger.warning("Cache invalidation failed for %s", ", ".join(keys))

    async def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Discarding non-JSON cache entry %s", key)
            return None
        return value if isinstance(value, dict) else None

    async def set_json(
        self, key: str, data: Dict[str, Any], ttl: int | None = None
    ) -> None:
        try:
            payload = json.dumps(data, default=str)
        except (TypeError, ValueError):
            logger.warning("Cache entry %s is not JSON-serialisable; skipped", key)
            return
        await self.set(key, payload, ttl=ttl)
