from sqlalchemy import Boolean, Column, Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB

from crm_app.models._columns import (
    created_at_column,
    owner_column,
    updated_at_column,
    uuid_pk,
)
from crm_app.models.base import Base


class UICustomization(Base):
    """A component-scoped set of style modifications, independently activatable.

    Rows are created inactive by the UI wizard, become active when the
    owner applies them, and are deactivated (never deleted) on rollback so
    the history stays available for undo.  ``updated_at`` doubles as the
    application order used when several active rows target the same
    component.
    """

    __tablename__ = "ui_customizations"
    id = uuid_pk()
    user_id = owner_column()
    customization_name = Column(String(100))
    component_name = Column(String(100), nullable=False)
    modifications = Column(JSONB, nullable=False, server_default=text("'{}'::jsonb"))
    description = Column(Text)
    preview_text = Column(Text)
    is_active = Column(Boolean, nullable=False, default=False, server_default="false")
    created_at = created_at_column()
    updated_at = updated_at_column()

    __table_args__ = (
        Index("idx_ui_customizations_user_active", "user_id", "is_active"),
    )
