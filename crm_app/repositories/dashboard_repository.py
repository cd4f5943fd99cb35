from typing import Any, Dict
from uuid import UUID

from sqlalchemy import case, func, select

from crm_app.core.constants import RESOLVED_TICKET_STATUSES
from crm_app.models.activity import Activity
from crm_app.models.customer import Customer
from crm_app.models.customization import UICustomization
from crm_app.models.deal import Deal
from crm_app.models.ticket import Ticket
from crm_app.repositories.base import BaseRepository
from crm_app.schemas.common import DealStage, TicketPriority

_CLOSED_STAGES = (DealStage.closed_won.value, DealStage.closed_lost.value)


class DashboardRepository(BaseRepository):
    """Aggregate queries behind the dashboard summary."""

    async def get_summary(self, owner_id: UUID) -> Dict[str, Any]:
        customers = await self._db.execute(
            select(func.count()).select_from(Customer).where(Customer.user_id == owner_id)
        )

        deal_row = (
            await self._db.execute(
                select(
                    func.count(Deal.id),
                    func.count(case((Deal.stage.notin_(_CLOSED_STAGES), Deal.id))),
                    func.coalesce(
                        func.sum(
                            case((Deal.stage.notin_(_CLOSED_STAGES), Deal.value), else_=0)
                        ),
                        0,
                    ),
                    func.coalesce(
                        func.sum(
                            case(
                                (Deal.stage == DealStage.closed_won.value, Deal.value),
                                else_=0,
                            )
                        ),
                        0,
                    ),
                ).where(Deal.user_id == owner_id)
            )
        ).one()

        open_ticket = Ticket.status.notin_(tuple(RESOLVED_TICKET_STATUSES))
        ticket_row = (
            await self._db.execute(
                select(
                    func.count(case((open_ticket, Ticket.id))),
                    func.count(
                        case(
                            (
                                open_ticket
                                & (Ticket.priority == TicketPriority.urgent.value),
                                Ticket.id,
                            )
                        )
                    ),
                ).where(Ticket.user_id == owner_id)
            )
        ).one()

        pending = await self._db.execute(
            select(func.count())
            .select_from(Activity)
            .where(Activity.user_id == owner_id, Activity.completed.is_(False))
        )
        customizations = await self._db.execute(
            select(func.count())
            .select_from(UICustomization)
            .where(
                UICustomization.user_id == owner_id,
                UICustomization.is_active.is_(True),
            )
        )

        return {
            "total_customers": int(customers.scalar() or 0),
            "total_deals": int(deal_row[0] or 0),
            "open_deals": int(deal_row[1] or 0),
            "pipeline_value": float(deal_row[2] or 0),
            "won_value": float(deal_row[3] or 0),
            "open_tickets": int(ticket_row[0] or 0),
            "urgent_tickets": int(ticket_row[1] or 0),
            "pending_activities": int(pending.scalar() or 0),
            "active_customizations": int(customizations.scalar() or 0),
        }
