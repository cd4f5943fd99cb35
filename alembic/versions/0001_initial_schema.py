"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _owner() -> sa.Column:
    return sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.text("now()"))


def upgrade() -> None:
    # customers
    op.create_table(
        "customers",
        _id(),
        _owner(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(50)),
        sa.Column("company", sa.String(200)),
        sa.Column("address", sa.Text()),
        sa.Column("city", sa.String(100)),
        sa.Column("state", sa.String(100)),
        sa.Column("zip", sa.String(20)),
        sa.Column("country", sa.String(100)),
        sa.Column("status", sa.String(50), server_default="active"),
        sa.Column("tags", postgresql.ARRAY(sa.String())),
        sa.Column("custom_fields", postgresql.JSONB()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_customers_user_id", "customers", ["user_id"])

    # deals
    op.create_table(
        "deals",
        _id(),
        _owner(),
        sa.Column(
            "customer_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("customers.id", ondelete="SET NULL"),
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("value", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("stage", sa.String(50), nullable=False, server_default="Lead"),
        sa.Column("expected_close_date", sa.Date()),
        sa.Column("probability", sa.Integer(), nullable=False, server_default="50"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint("probability BETWEEN 0 AND 100", name="ck_deal_probability"),
    )
    op.create_index("ix_deals_user_id", "deals", ["user_id"])

    # tickets
    op.create_table(
        "tickets",
        _id(),
        _owner(),
        sa.Column(
            "customer_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("customers.id", ondelete="SET NULL"),
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("status", sa.String(50), nullable=False, server_default="New"),
        sa.Column("priority", sa.String(50), nullable=False, server_default="Medium"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.Column("resolved_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_tickets_user_id", "tickets", ["user_id"])

    # activities
    op.create_table(
        "activities",
        _id(),
        _owner(),
        sa.Column(
            "customer_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
        ),
        sa.Column(
            "deal_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("deals.id", ondelete="CASCADE"),
        ),
        sa.Column(
            "ticket_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("tickets.id", ondelete="CASCADE"),
        ),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("subject", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("due_date", sa.DateTime(timezone=True)),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default="false"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_activities_user_id", "activities", ["user_id"])

    # ui_customizations: updated_at doubles as the application order
    op.create_table(
        "ui_customizations",
        _id(),
        _owner(),
        sa.Column("customization_name", sa.String(100)),
        sa.Column("component_name", sa.String(100), nullable=False),
        sa.Column(
            "modifications",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("description", sa.Text()),
        sa.Column("preview_text", sa.Text()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="false"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_ui_customizations_user_id", "ui_customizations", ["user_id"])
    op.create_index(
        "idx_ui_customizations_user_active",
        "ui_customizations",
        ["user_id", "is_active"],
    )

    # chat_sessions / chat_messages
    op.create_table(
        "chat_sessions",
        _id(),
        _owner(),
        sa.Column(
            "title", sa.String(200), nullable=False, server_default="New Conversation"
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_chat_sessions_user_id", "chat_sessions", ["user_id"])

    op.create_table(
        "chat_messages",
        _id(),
        sa.Column(
            "session_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("chat_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("customization_data", postgresql.JSONB()),
        _timestamp("created_at"),
        sa.CheckConstraint("role IN ('user', 'assistant')", name="ck_chat_message_role"),
    )
    op.create_index("ix_chat_messages_session_id", "chat_messages", ["session_id"])

    # user_settings: one row per user
    op.create_table(
        "user_settings",
        _id(),
        _owner(),
        sa.Column("openai_api_key", sa.Text()),
        sa.Column(
            "ai_features_enabled", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_used_at", sa.DateTime(timezone=True)),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("user_id", name="uq_user_settings_user_id"),
    )
    op.create_index("ix_user_settings_user_id", "user_settings", ["user_id"])

    # ai_insights
    op.create_table(
        "ai_insights",
        _id(),
        _owner(),
        sa.Column("entity_type", sa.String(50)),
        sa.Column("entity_id", postgresql.UUID(as_uuid=True)),
        sa.Column("insight_type", sa.String(50), nullable=False),
        sa.Column("insight_data", postgresql.JSONB(), nullable=False),
        sa.Column("confidence_score", sa.Numeric(3, 2)),
        _timestamp("created_at"),
    )
    op.create_index("ix_ai_insights_user_id", "ai_insights", ["user_id"])
    op.create_index(
        "idx_ai_insights_entity", "ai_insights", ["user_id", "entity_type", "entity_id"]
    )


def downgrade() -> None:
    op.drop_table("ai_insights")
    op.drop_table("user_settings")
    op.drop_table("chat_messages")
    op.drop_table("chat_sessions")
    op.drop_table("ui_customizations")
    op.drop_table("activities")
    op.drop_table("tickets")
    op.drop_table("deals")
    op.drop_table("customers")
