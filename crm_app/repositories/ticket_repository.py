from crm_app.models.ticket import Ticket
from crm_app.repositories.base import OwnedRepository


class TicketRepository(OwnedRepository[Ticket]):
    """Encapsulates queries against the ``tickets`` table."""

    model = Ticket
