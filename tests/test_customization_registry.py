from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from crm_app.core.constants import DYNAMIC_STYLES_ID, PREVIEW_STYLES_ID
from crm_app.core.stylesheet import StyleSheetDocument, StyleSheetHost
from crm_app.services.customization_registry import (
    CustomizationRegistry,
    merge_customizations,
)
from crm_app.services.preview_session import PreviewSession
from crm_app.services.style_compiler import compile_stylesheet


def _registry(rules, document=None):
    repo = AsyncMock()
    repo.list_in_application_order = AsyncMock(return_value=rules)
    return CustomizationRegistry(
        uuid4(), repo, document if document is not None else StyleSheetDocument()
    )


class TestMergeCustomizations:
    def test_inactive_rules_contribute_nothing(self, rule_factory):
        rules = [
            rule_factory("deal-card", {"theme": "dark"}, is_active=False),
            rule_factory("sidebar", {"fontSize": "12px"}, is_active=True),
        ]
        assert merge_customizations(rules) == {"sidebar": {"fontSize": "12px"}}

    def test_later_rule_wins_per_field(self, rule_factory):
        rules = [
            rule_factory(
                "deal-card",
                {"theme": "dark", "colors": {"background": "red", "text": "white"}},
                is_active=True,
            ),
            rule_factory(
                "deal-card",
                {"theme": "neon", "colors": {"background": "green"}},
                is_active=True,
            ),
        ]
        merged = merge_customizations(rules)
        assert merged == {
            "deal-card": {
                "theme": "neon",
                "colors": {"background": "green", "text": "white"},
            }
        }

    def test_merge_does_not_mutate_rules(self, rule_factory):
        first = rule_factory("deal-card", {"colors": {"background": "red"}}, is_active=True)
        second = rule_factory("deal-card", {"colors": {"text": "blue"}}, is_active=True)
        merge_customizations([first, second])
        assert first.modifications == {"colors": {"background": "red"}}


class TestCustomizationRegistry:
    @pytest.mark.asyncio
    async def test_load_pushes_active_rules(self, rule_factory):
        active = rule_factory("deal-card", {"theme": "minimal"}, is_active=True)
        inactive = rule_factory("sidebar", {"theme": "dark"})
        registry = _registry([active, inactive])

        css = await registry.load()

        assert registry.loaded
        assert css == compile_stylesheet({"deal-card": {"theme": "minimal"}})
        assert registry.stylesheet == css

    @pytest.mark.asyncio
    async def test_load_with_no_rules_yields_empty_stylesheet(self):
        registry = _registry([])
        assert await registry.load() == ""
        assert registry.stylesheet == ""

    @pytest.mark.asyncio
    async def test_apply_then_rollback_restores_previous_stylesheet(self, rule_factory):
        base = rule_factory("sidebar", {"theme": "dark"}, is_active=True)
        registry = _registry([base])
        before = await registry.load()

        candidate = rule_factory("deal-card", {"colors": {"background": "#10b981"}})
        after_apply = registry.apply(candidate)
        assert '[data-component="deal-card"]' in after_apply
        assert "background-color: #10b981 !important;" in after_apply

        after_rollback = registry.remove(candidate.id)
        assert after_rollback == before

    @pytest.mark.asyncio
    async def test_reapplied_rule_moves_to_end_of_order(self, rule_factory):
        dark = rule_factory("deal-card", {"theme": "dark"}, is_active=True)
        light = rule_factory("deal-card", {"theme": "light"}, is_active=True)
        registry = _registry([dark, light])
        await registry.load()
        assert registry.merged["deal-card"]["theme"] == "light"

        registry.apply(dark)

        assert [r.id for r in registry.rules] == [light.id, dark.id]
        assert registry.merged["deal-card"]["theme"] == "dark"

    @pytest.mark.asyncio
    async def test_removing_unknown_rule_is_ignored(self, rule_factory):
        rule = rule_factory("deal-card", {"theme": "bold"}, is_active=True)
        registry = _registry([rule])
        before = await registry.load()
        assert registry.remove(uuid4()) == before

    @pytest.mark.asyncio
    async def test_single_resource_is_replaced_not_appended(self, rule_factory):
        document = StyleSheetDocument()
        registry = _registry([], document)
        await registry.load()
        resource = document.get(DYNAMIC_STYLES_ID)

        rule = rule_factory("deal-card", {"theme": "neon"})
        for _ in range(3):
            registry.apply(rule)
            registry.remove(rule.id)
        registry.apply(rule)

        assert document.get(DYNAMIC_STYLES_ID) is resource
        assert resource.content.count('[data-component="deal-card"]') == 1


class TestPreviewSession:
    @pytest.mark.asyncio
    async def test_preview_does_not_touch_applied_styles(self, rule_factory):
        document = StyleSheetDocument()
        applied = rule_factory("sidebar", {"theme": "dark"}, is_active=True)
        registry = _registry([applied], document)
        applied_css = await registry.load()

        session = PreviewSession(document)
        candidate = rule_factory("deal-card", {"theme": "neon"})
        preview_css = session.enable(candidate)

        assert session.enabled
        assert session.customization_id == candidate.id
        assert preview_css == compile_stylesheet({"deal-card": {"theme": "neon"}})
        assert registry.stylesheet == applied_css

        session.disable()
        assert not session.enabled
        assert session.css == ""
        assert PREVIEW_STYLES_ID not in document
        assert registry.stylesheet == applied_css

    def test_enabling_again_replaces_previous_preview(self, rule_factory):
        session = PreviewSession(StyleSheetDocument())
        session.enable(rule_factory("deal-card", {"theme": "neon"}))
        second = rule_factory("sidebar", {"theme": "bold"})
        session.enable(second)

        assert session.customization_id == second.id
        assert '"deal-card"' not in session.css
        assert '"sidebar"' in session.css

    def test_preview_survives_across_sessions_of_same_owner(self, rule_factory):
        host = StyleSheetHost()
        owner = uuid4()
        candidate = rule_factory("deal-card", {"theme": "neon"})
        PreviewSession(host.document(owner)).enable(candidate)

        later = PreviewSession(host.document(owner))
        assert later.enabled
        assert later.customization_id == candidate.id
        assert host.get(uuid4()) is None

    def test_host_releases_only_empty_documents(self, rule_factory):
        host = StyleSheetHost()
        owner = uuid4()
        candidate = rule_factory("deal-card", {"theme": "neon"})
        PreviewSession(host.document(owner)).enable(candidate)

        host.release(owner)
        assert host.get(owner) is not None

        PreviewSession(host.get(owner)).disable()
        host.release(owner)
        assert host.get(owner) is None
        assert len(host) == 0

    def test_host_lookup_does_not_create(self):
        host = StyleSheetHost()
        host.release(uuid4())
        assert host.get(uuid4()) is None
        assert len(host) == 0
