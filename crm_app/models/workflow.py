from sqlalchemy import Boolean, Column, String, text
from sqlalchemy.dialects.postgresql import JSONB

from crm_app.models._columns import (
    created_at_column,
    owner_column,
    updated_at_column,
    uuid_pk,
)
from crm_app.models.base import Base


class WorkflowRule(Base):
    """A "when <trigger> then <action>" automation rule.

    Rules are stored and toggled here; nothing in this service evaluates
    them.  ``trigger_value`` and ``action_value`` hold free-form
    parameters for the trigger and action (e.g. the target deal stage).
    """

    __tablename__ = "workflow_rules"
    id = uuid_pk()
    user_id = owner_column()
    name = Column(String(200), nullable=False)
    trigger_type = Column(String(50), nullable=False)
    trigger_value = Column(
        JSONB, nullable=False, default=dict, server_default=text("'{}'::jsonb")
    )
    action_type = Column(String(50), nullable=False)
    action_value = Column(
        JSONB, nullable=False, default=dict, server_default=text("'{}'::jsonb")
    )
    is_active = Column(Boolean, nullable=False, default=True, server_default="true")
    created_at = created_at_column()
    updated_at = updated_at_column()
