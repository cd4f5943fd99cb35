from crm_app.models.base import Base
from crm_app.models.customization import UICustomization
from crm_app.models.chat import ChatSession, ChatMessage
from crm_app.models.user_settings import UserSettings
from crm_app.models.customer import Customer
from crm_app.models.deal import Deal
from crm_app.models.ticket import Ticket
from crm_app.models.activity import Activity
from crm_app.models.ai_insight import AIInsight
from crm_app.models.workflow import WorkflowRule

# Import event listeners to register them
from crm_app.models import listeners  # noqa: F401

__all__ = [
    "Base",
    "UICustomization",
    "ChatSession",
    "ChatMessage",
    "UserSettings",
    "Customer",
    "Deal",
    "Ticket",
    "Activity",
    "AIInsight",
    "WorkflowRule",
]
