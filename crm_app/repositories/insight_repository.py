from typing import Any, Optional
from uuid import UUID

from crm_app.models.ai_insight import AIInsight
from crm_app.repositories.base import OwnedRepository


class InsightRepository(OwnedRepository[AIInsight]):
    """Encapsulates writes to the ``ai_insights`` table."""

    model = AIInsight

    async def record(
        self,
        owner_id: UUID,
        *,
        insight_type: str,
        insight_data: Any,
        entity_type: Optional[str] = None,
        entity_id: Optional[UUID] = None,
        confidence_score: Optional[float] = None,
    ) -> AIInsight:
        return await self.create(
            owner_id,
            insight_type=insight_type,
            insight_data=insight_data,
            entity_type=entity_type,
            entity_id=entity_id,
            confidence_score=confidence_score,
        )
