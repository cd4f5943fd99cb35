from enum import Enum
from pydantic import BaseModel


class Theme(str, Enum):
    neon = "neon"
    minimal = "minimal"
    bold = "bold"
    dark = "dark"
    light = "light"
    custom = "custom"


class ChatRole(str, Enum):
    user = "user"
    assistant = "assistant"


class DealStage(str, Enum):
    lead = "Lead"
    qualified = "Qualified"
    proposal = "Proposal"
    negotiation = "Negotiation"
    closed_won = "Closed Won"
    closed_lost = "Closed Lost"


class TicketStatus(str, Enum):
    new = "New"
    in_progress = "In Progress"
    pending = "Pending"
    resolved = "Resolved"
    closed = "Closed"


class TicketPriority(str, Enum):
    low = "Low"
    medium = "Medium"
    high = "High"
    urgent = "Urgent"


class ActivityType(str, Enum):
    call = "call"
    email = "email"
    meeting = "meeting"
    task = "task"
    note = "note"


class WorkflowTrigger(str, Enum):
    deal_stage_change = "deal_stage_change"
    ticket_created = "ticket_created"
    customer_created = "customer_created"
    task_overdue = "task_overdue"


class WorkflowAction(str, Enum):
    create_task = "create_task"
    send_notification = "send_notification"
    update_status = "update_status"
    assign_owner = "assign_owner"


class RelatedEntityType(str, Enum):
    customer = "customer"
    deal = "deal"
    ticket = "ticket"


class InsightType(str, Enum):
    customer_analysis = "customer_analysis"
    deal_scoring = "deal_scoring"
    ticket_classification = "ticket_classification"
    email_template = "email_template"
    activity_suggestions = "activity_suggestions"


class SuccessResponse(BaseModel):
    """Generic success response base."""

    success: bool = True
