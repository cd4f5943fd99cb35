from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID

from crm_app.models._columns import (
    created_at_column,
    owner_column,
    updated_at_column,
    uuid_pk,
)
from crm_app.models.base import Base


class Activity(Base):
    __tablename__ = "activities"
    id = uuid_pk()
    user_id = owner_column()
    customer_id = Column(
        UUID(as_uuid=True), ForeignKey("customers.id", ondelete="CASCADE")
    )
    deal_id = Column(UUID(as_uuid=True), ForeignKey("deals.id", ondelete="CASCADE"))
    ticket_id = Column(
        UUID(as_uuid=True), ForeignKey("tickets.id", ondelete="CASCADE")
    )
    type = Column(String(50), nullable=False)
    subject = Column(String(200), nullable=False)
    description = Column(Text)
    due_date = Column(DateTime(timezone=True))
    completed = Column(Boolean, nullable=False, default=False, server_default="false")
    created_at = created_at_column()
    updated_at = updated_at_column()
