from sqlalchemy import Boolean, Column, DateTime, Integer, Text, UniqueConstraint

from crm_app.models._columns import (
    created_at_column,
    owner_column,
    updated_at_column,
    uuid_pk,
)
from crm_app.models.base import Base


class UserSettings(Base):
    """Per-user AI configuration and usage counter."""

    __tablename__ = "user_settings"
    id = uuid_pk()
    user_id = owner_column()
    openai_api_key = Column(Text)
    ai_features_enabled = Column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    usage_count = Column(Integer, nullable=False, default=0, server_default="0")
    last_used_at = Column(DateTime(timezone=True))
    created_at = created_at_column()
    updated_at = updated_at_column()

    __table_args__ = (UniqueConstraint("user_id", name="uq_user_settings_user_id"),)
