from typing import List
from uuid import UUID

from sqlalchemy import select

from crm_app.models.activity import Activity
from crm_app.repositories.base import OwnedRepository

# Related entity type -> foreign key column on ``activities``
_RELATED_COLUMNS = {
    "customer": Activity.customer_id,
    "deal": Activity.deal_id,
    "ticket": Activity.ticket_id,
}


class ActivityRepository(OwnedRepository[Activity]):
    """Encapsulates queries against the ``activities`` table."""

    model = Activity

    async def list_for_entity(
        self, owner_id: UUID, entity_type: str, entity_id: UUID
    ) -> List[Activity]:
        """Return activities linked to a customer, deal or ticket."""
        column = _RELATED_COLUMNS.get(entity_type)
        if column is None:
            return []
        result = await self._db.execute(
            select(Activity)
            .where(Activity.user_id == owner_id, column == entity_id)
            .order_by(Activity.created_at.desc())
        )
        return list(result.scalars().all())
