from sqlalchemy import Column, Index, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB, UUID

from crm_app.models._columns import created_at_column, owner_column, uuid_pk
from crm_app.models.base import Base


class AIInsight(Base):
    """Stored result of one AI feature call (scoring, classification, ...)."""

    __tablename__ = "ai_insights"
    id = uuid_pk()
    user_id = owner_column()
    entity_type = Column(String(50))
    entity_id = Column(UUID(as_uuid=True))
    insight_type = Column(String(50), nullable=False)
    insight_data = Column(JSONB, nullable=False)
    confidence_score = Column(Numeric(3, 2))
    created_at = created_at_column()

    __table_args__ = (
        Index("idx_ai_insights_entity", "user_id", "entity_type", "entity_id"),
    )
