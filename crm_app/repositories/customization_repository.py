from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select

from crm_app.models.customization import UICustomization
from crm_app.repositories.base import OwnedRepository


class CustomizationRepository(OwnedRepository[UICustomization]):
    """Encapsulates queries against the ``ui_customizations`` table."""

    model = UICustomization

    async def list_in_application_order(self, owner_id: UUID) -> List[UICustomization]:
        """Return every rule of the owner, oldest application first.

        The registry merges active rules in this order, so the most
        recently applied rule wins on conflicting fields.
        """
        result = await self._db.execute(
            select(UICustomization)
            .where(UICustomization.user_id == owner_id)
            .order_by(
                UICustomization.updated_at.asc(),
                UICustomization.created_at.asc(),
                UICustomization.id.asc(),
            )
        )
        return list(result.scalars().all())

    async def create_candidate(
        self,
        owner_id: UUID,
        *,
        customization_name: str,
        component_name: str,
        modifications: Dict[str, Any],
        description: Optional[str],
        preview_text: Optional[str],
    ) -> UICustomization:
        """Store a generated candidate; candidates always start inactive."""
        return await self.create(
            owner_id,
            customization_name=customization_name,
            component_name=component_name,
            modifications=modifications,
            description=description,
            preview_text=preview_text,
            is_active=False,
        )

    async def set_active(self, rule: UICustomization, active: bool) -> UICustomization:
        return await self.update(rule, is_active=active)

