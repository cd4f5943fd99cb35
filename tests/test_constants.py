from crm_app.core.constants import (
    ACTIVITY_TYPES,
    CHAT_ROLES,
    CONFIDENCE_SCORES,
    DYNAMIC_STYLES_ID,
    INSIGHT_TYPES,
    PREVIEW_STYLES_ID,
    RESOLVED_TICKET_STATUSES,
    THEMES,
    TICKET_STATUSES,
    UI_COMPONENTS,
)
from crm_app.schemas.common import ActivityType, InsightType, Theme, TicketStatus
from crm_app.services.ai_insight_service import FEATURES
from crm_app.services.style_compiler import THEME_BUNDLES


class TestConstantsConsistency:
    """Verify that constants, enums, and lookup tables stay in sync."""

    def test_every_theme_has_a_bundle(self):
        assert set(THEME_BUNDLES) == THEMES
        for member in Theme:
            assert member.value in THEME_BUNDLES

    def test_custom_theme_adds_nothing(self):
        assert THEME_BUNDLES["custom"] == ()

    def test_activity_types_match_enum(self):
        assert ACTIVITY_TYPES == {member.value for member in ActivityType}

    def test_resolved_statuses_are_subset(self):
        assert RESOLVED_TICKET_STATUSES.issubset(TICKET_STATUSES)
        assert TicketStatus.in_progress.value not in RESOLVED_TICKET_STATUSES

    def test_every_insight_type_has_a_feature(self):
        assert set(FEATURES) == set(InsightType)
        assert {f.value for f in FEATURES} == INSIGHT_TYPES

    def test_chat_roles(self):
        assert CHAT_ROLES == {"user", "assistant"}

    def test_stylesheet_ids_differ(self):
        assert DYNAMIC_STYLES_ID != PREVIEW_STYLES_ID

    def test_component_names_are_unique(self):
        assert len(UI_COMPONENTS) == len(set(UI_COMPONENTS))

    def test_confidence_scores_ordered(self):
        assert CONFIDENCE_SCORES["low"] < CONFIDENCE_SCORES["medium"] < CONFIDENCE_SCORES["high"]
