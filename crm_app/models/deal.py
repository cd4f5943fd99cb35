from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID

from crm_app.models._columns import (
    created_at_column,
    owner_column,
    updated_at_column,
    uuid_pk,
)
from crm_app.models.base import Base


class Deal(Base):
    """A sales opportunity moving through the pipeline stages."""

    __tablename__ = "deals"
    id = uuid_pk()
    user_id = owner_column()
    customer_id = Column(
        UUID(as_uuid=True), ForeignKey("customers.id", ondelete="SET NULL")
    )
    title = Column(String(200), nullable=False)
    description = Column(Text)
    value = Column(Numeric(15, 2), nullable=False, server_default="0")
    stage = Column(String(50), nullable=False, server_default="Lead")
    expected_close_date = Column(Date)
    probability = Column(Integer, nullable=False, server_default="50")
    created_at = created_at_column()
    updated_at = updated_at_column()

    __table_args__ = (
        CheckConstraint("probability BETWEEN 0 AND 100", name="ck_deal_probability"),
    )
