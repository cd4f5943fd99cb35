"""API-layer dependency functions.

Re-exports all dependency factories from ``crm_app.dependencies`` so that
endpoint modules only need to import from ``crm_app.api.deps``.
"""

from crm_app.dependencies import (
    # Identity
    get_current_user_id,
    get_stylesheet_host,
    # Repository factories
    get_customization_repo,
    get_chat_repo,
    get_settings_repo,
    get_customer_repo,
    get_deal_repo,
    get_ticket_repo,
    get_activity_repo,
    get_workflow_repo,
    get_insight_repo,
    get_dashboard_repo,
    # Service factories
    get_customization_service,
    get_ui_wizard_service,
    get_chat_service,
    get_settings_service,
    get_ai_insight_service,
    get_customer_service,
    get_deal_service,
    get_ticket_service,
    get_activity_service,
    get_workflow_service,
    get_dashboard_service,
    # Redis
    get_redis_client,
    get_cache_service,
)

__all__ = [
    "get_current_user_id",
    "get_stylesheet_host",
    "get_customization_repo",
    "get_chat_repo",
    "get_settings_repo",
    "get_customer_repo",
    "get_deal_repo",
    "get_ticket_repo",
    "get_activity_repo",
    "get_workflow_repo",
    "get_insight_repo",
    "get_dashboard_repo",
    "get_customization_service",
    "get_ui_wizard_service",
    "get_chat_service",
    "get_settings_service",
    "get_ai_insight_service",
    "get_customer_service",
    "get_deal_service",
    "get_ticket_service",
    "get_activity_service",
    "get_workflow_service",
    "get_dashboard_service",
    "get_redis_client",
    "get_cache_service",
]
