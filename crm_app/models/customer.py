from sqlalchemy import ARRAY, Column, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from crm_app.models._columns import (
    created_at_column,
    owner_column,
    updated_at_column,
    uuid_pk,
)
from crm_app.models.base import Base


class Customer(Base):
    """A customer record owned by one CRM user."""

    __tablename__ = "customers"
    id = uuid_pk()
    user_id = owner_column()
    name = Column(String(200), nullable=False)
    email = Column(String(255))
    phone = Column(String(50))
    company = Column(String(200))
    address = Column(Text)
    city = Column(String(100))
    state = Column(String(100))
    zip = Column(String(20))
    country = Column(String(100))
    status = Column(String(50), server_default="active")
    tags = Column(ARRAY(String))
    custom_fields = Column(JSONB)
    created_at = created_at_column()
    updated_at = updated_at_column()
