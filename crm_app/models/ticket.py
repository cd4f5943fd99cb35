from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID

from crm_app.models._columns import (
    created_at_column,
    owner_column,
    updated_at_column,
    uuid_pk,
)
from crm_app.models.base import Base


class Ticket(Base):
    """A support ticket; ``resolved_at`` is stamped on Resolved/Closed."""

    __tablename__ = "tickets"
    id = uuid_pk()
    user_id = owner_column()
    customer_id = Column(
        UUID(as_uuid=True), ForeignKey("customers.id", ondelete="SET NULL")
    )
    title = Column(String(200), nullable=False)
    description = Column(Text)
    status = Column(String(50), nullable=False, server_default="New")
    priority = Column(String(50), nullable=False, server_default="Medium")
    created_at = created_at_column()
    updated_at = updated_at_column()
    resolved_at = Column(DateTime(timezone=True))
