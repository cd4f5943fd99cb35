import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from crm_app.core.cache import dashboard_key
from crm_app.schemas.settings import UserSettingsUpdate
from crm_app.services.dashboard_service import DashboardService
from crm_app.services.settings_service import SettingsService


class TestSettingsService:
    @pytest.mark.asyncio
    async def test_defaults_without_row(self, owner_id):
        repo = AsyncMock()
        repo.get_by_owner = AsyncMock(return_value=None)

        result = await SettingsService(repo).get(owner_id)

        assert result.ai_features_enabled is False
        assert result.has_api_key is False
        assert result.usage_count == 0

    @pytest.mark.asyncio
    async def test_update_stores_key_without_echoing_it(self, owner_id):
        row = SimpleNamespace(
            ai_features_enabled=False, openai_api_key=None, usage_count=3, last_used_at=None
        )
        repo = AsyncMock()
        repo.get_or_create = AsyncMock(return_value=row)

        result = await SettingsService(repo).update(
            owner_id,
            UserSettingsUpdate(ai_features_enabled=True, openai_api_key="  sk-new  "),
        )

        assert row.openai_api_key == "sk-new"
        assert result.ai_features_enabled is True
        assert result.has_api_key is True
        assert "sk-new" not in result.model_dump_json()
        repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_key_clears_it(self, owner_id):
        row = SimpleNamespace(
            ai_features_enabled=True, openai_api_key="sk-old", usage_count=0, last_used_at=None
        )
        repo = AsyncMock()
        repo.get_or_create = AsyncMock(return_value=row)

        result = await SettingsService(repo).update(
            owner_id, UserSettingsUpdate(openai_api_key="")
        )

        assert row.openai_api_key is None
        assert result.has_api_key is False
        assert result.ai_features_enabled is True


class TestDashboardService:
    @pytest.mark.asyncio
    async def test_cache_hit_skips_database(self, owner_id, mock_cache, mock_redis):
        mock_redis.get.return_value = json.dumps({"total_customers": 4, "open_tickets": 2})
        repo = AsyncMock()

        summary = await DashboardService(repo, cache=mock_cache).get_summary(owner_id)

        assert summary.total_customers == 4
        assert summary.open_tickets == 2
        repo.get_summary.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cache_miss_queries_and_stores(self, owner_id, mock_cache, mock_redis):
        repo = AsyncMock()
        repo.get_summary = AsyncMock(
            return_value={"total_customers": 1, "pipeline_value": 2500.0}
        )

        summary = await DashboardService(repo, cache=mock_cache).get_summary(owner_id)

        assert summary.pipeline_value == 2500.0
        key, _ttl, payload = mock_redis.setex.await_args.args
        assert key == dashboard_key(owner_id)
        assert json.loads(payload)["total_customers"] == 1

    @pytest.mark.asyncio
    async def test_works_without_redis(self, owner_id):
        repo = AsyncMock()
        repo.get_summary = AsyncMock(return_value={"active_customizations": 3})

        summary = await DashboardService(repo).get_summary(owner_id)

        assert summary.active_customizations == 3
