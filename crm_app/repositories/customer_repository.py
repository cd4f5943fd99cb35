from crm_app.models.customer import Customer
from crm_app.repositories.base import OwnedRepository


class CustomerRepository(OwnedRepository[Customer]):
    """Encapsulates queries against the ``customers`` table."""

    model = Customer
