from typing import List
from uuid import UUID

from sqlalchemy import select

from crm_app.models.deal import Deal
from crm_app.repositories.base import OwnedRepository


class DealRepository(OwnedRepository[Deal]):
    """Encapsulates queries against the ``deals`` table."""

    model = Deal

    async def list_for_customer(self, owner_id: UUID, customer_id: UUID) -> List[Deal]:
        result = await self._db.execute(
            select(Deal)
            .where(Deal.user_id == owner_id, Deal.customer_id == customer_id)
            .order_by(Deal.created_at.desc())
        )
        return list(result.scalars().all())
