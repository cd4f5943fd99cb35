from typing import Dict, FrozenSet, Tuple

from crm_app.schemas.common import (
    ActivityType,
    ChatRole,
    InsightType,
    Theme,
    TicketStatus,
)

# UI regions tagged with ``data-component`` in the frontend.  The wizard's
# instruction lists these; unknown names are still stored and compiled.
UI_COMPONENTS: Tuple[str, ...] = (
    "dashboard",
    "dashboard-metrics",
    "metric-card",
    "task-overview-card",
    "recent-activities-card",
    "deal-pipeline",
    "deal-stage-column",
    "deal-card",
    "customer-card",
    "ticket-card",
    "activity-card",
    "sidebar",
    "form-input",
)

# Component name used for degraded candidates
GENERAL_COMPONENT: str = "general"

COMPONENT_MARKER_ATTRIBUTE: str = "data-component"

# Stylesheet element ids owned by the registry and the preview session
DYNAMIC_STYLES_ID: str = "ai-dynamic-styles"
PREVIEW_STYLES_ID: str = "ai-preview-styles"

THEMES: FrozenSet[str] = frozenset(t.value for t in Theme)

CHAT_ROLES: FrozenSet[str] = frozenset(r.value for r in ChatRole)

DEFAULT_SESSION_TITLE: str = "New Conversation"
SESSION_TITLE_MAX_LENGTH: int = 50
CUSTOMIZATION_NAME_MAX_LENGTH: int = 100

TICKET_STATUSES: FrozenSet[str] = frozenset(s.value for s in TicketStatus)
RESOLVED_TICKET_STATUSES: FrozenSet[str] = frozenset(
    {TicketStatus.resolved.value, TicketStatus.closed.value}
)

ACTIVITY_TYPES: FrozenSet[str] = frozenset(a.value for a in ActivityType)

INSIGHT_TYPES: FrozenSet[str] = frozenset(i.value for i in InsightType)

# Deal-scoring confidence label -> stored confidence_score
CONFIDENCE_SCORES: Dict[str, float] = {
    "high": 0.90,
    "medium": 0.75,
    "low": 0.60,
}
