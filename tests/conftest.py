from datetime import datetime, timezone
from types import SimpleNamespace
from typing import TYPE_CHECKING, AsyncGenerator, Dict, Optional
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from crm_app.core.cache import CacheService

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from crm_app.core.rate_limit import limiter
from crm_app.main import app


def make_rule(
    component_name: str = "deal-card",
    modifications: Optional[Dict] = None,
    is_active: bool = False,
    rule_id: Optional[UUID] = None,
    owner_id: Optional[UUID] = None,
) -> SimpleNamespace:
    """Return an object shaped like a ``UICustomization`` row."""
    now = datetime.now(timezone.utc)
    return SimpleNamespace(
        id=rule_id or uuid4(),
        user_id=owner_id or uuid4(),
        customization_name="make it green",
        component_name=component_name,
        modifications=modifications if modifications is not None else {},
        description="Green deal cards",
        preview_text="Deal cards are green",
        is_active=is_active,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture(autouse=True)
def _reset_app_state():
    """Keep rate limits and dependency overrides from leaking between tests."""
    limiter.enabled = False
    yield
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Yield an ``httpx.AsyncClient`` wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def owner_id() -> UUID:
    return uuid4()


@pytest.fixture
def owner_headers(owner_id) -> Dict[str, str]:
    return {"X-User-Id": str(owner_id)}


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Return an ``AsyncMock`` that behaves like ``redis.asyncio.Redis``."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.setex = AsyncMock()
    redis.delete = AsyncMock()
    redis.ping = AsyncMock()
    return redis


@pytest.fixture
def mock_cache(mock_redis) -> "CacheService":
    """Return a ``CacheService`` backed by the mock Redis client."""
    from crm_app.core.cache import CacheService

    return CacheService(redis_client=mock_redis)


@pytest.fixture
def settings_repo() -> AsyncMock:
    """A settings repository whose owner has AI enabled with their own key."""
    repo = AsyncMock()
    repo.get_by_owner = AsyncMock(
        return_value=SimpleNamespace(ai_features_enabled=True, openai_api_key="sk-owner")
    )
    repo.record_usage = AsyncMock()
    return repo


@pytest.fixture
def rule_factory():
    """Build ``UICustomization``-shaped rows; see :func:`make_rule`."""
    return make_rule
