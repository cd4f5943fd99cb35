"""Pydantic schemas package – re-exports for convenience."""

# Common enums
from crm_app.schemas.common import (
    Theme as Theme,
    ChatRole as ChatRole,
    DealStage as DealStage,
    TicketStatus as TicketStatus,
    TicketPriority as TicketPriority,
    ActivityType as ActivityType,
    WorkflowTrigger as WorkflowTrigger,
    WorkflowAction as WorkflowAction,
    RelatedEntityType as RelatedEntityType,
    InsightType as InsightType,
    SuccessResponse as SuccessResponse,
)

# Customization schemas
from crm_app.schemas.customization import (
    ColorSet as ColorSet,
    SpacingSet as SpacingSet,
    LayoutSet as LayoutSet,
    Modifications as Modifications,
    WizardGenerateRequest as WizardGenerateRequest,
    CustomizationCandidate as CustomizationCandidate,
    CustomizationOut as CustomizationOut,
    CustomizationActionResponse as CustomizationActionResponse,
    CustomizationListResponse as CustomizationListResponse,
    PreviewResponse as PreviewResponse,
)

# Chat schemas
from crm_app.schemas.chat import (
    ChatSessionCreate as ChatSessionCreate,
    ChatSessionOut as ChatSessionOut,
    ChatMessageOut as ChatMessageOut,
    ChatHistoryResponse as ChatHistoryResponse,
)

# CRM schemas
from crm_app.schemas.crm import (
    CustomerCreate as CustomerCreate,
    CustomerUpdate as CustomerUpdate,
    CustomerOut as CustomerOut,
    DealCreate as DealCreate,
    DealUpdate as DealUpdate,
    DealOut as DealOut,
    TicketCreate as TicketCreate,
    TicketUpdate as TicketUpdate,
    TicketOut as TicketOut,
    ActivityCreate as ActivityCreate,
    ActivityUpdate as ActivityUpdate,
    ActivityOut as ActivityOut,
    DeleteResponse as DeleteResponse,
    DashboardSummary as DashboardSummary,
)

# Workflow schemas
from crm_app.schemas.workflow import (
    WorkflowRuleCreate as WorkflowRuleCreate,
    WorkflowRuleUpdate as WorkflowRuleUpdate,
    WorkflowRuleOut as WorkflowRuleOut,
)

# AI insight schemas
from crm_app.schemas.ai import (
    CustomerInsightRequest as CustomerInsightRequest,
    DealScoringRequest as DealScoringRequest,
    TicketClassificationRequest as TicketClassificationRequest,
    EmailTemplateRequest as EmailTemplateRequest,
    ActivitySuggestionRequest as ActivitySuggestionRequest,
    InsightResponse as InsightResponse,
)

# Settings schemas
from crm_app.schemas.settings import (
    UserSettingsUpdate as UserSettingsUpdate,
    UserSettingsOut as UserSettingsOut,
)
