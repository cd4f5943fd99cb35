"""Repository layer – all database access goes through here.

Repositories encapsulate SQLAlchemy queries so that the service layer
only contains business logic.
"""

from crm_app.repositories.customization_repository import CustomizationRepository
from crm_app.repositories.chat_repository import ChatRepository
from crm_app.repositories.user_settings_repository import UserSettingsRepository
from crm_app.repositories.customer_repository import CustomerRepository
from crm_app.repositories.deal_repository import DealRepository
from crm_app.repositories.ticket_repository import TicketRepository
from crm_app.repositories.activity_repository import ActivityRepository
from crm_app.repositories.workflow_repository import WorkflowRuleRepository
from crm_app.repositories.insight_repository import InsightRepository
from crm_app.repositories.dashboard_repository import DashboardRepository

__all__ = [
    "CustomizationRepository",
    "ChatRepository",
    "UserSettingsRepository",
    "CustomerRepository",
    "DealRepository",
    "TicketRepository",
    "ActivityRepository",
    "WorkflowRuleRepository",
    "InsightRepository",
    "DashboardRepository",
]
