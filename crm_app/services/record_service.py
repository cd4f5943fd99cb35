import logging
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Generic, List, Optional, Tuple, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from crm_app.core.cache import CacheService, dashboard_key
from crm_app.core.constants import RESOLVED_TICKET_STATUSES
from crm_app.core.exceptions import (
    ActivityNotFoundError,
    CRMError,
    CustomerNotFoundError,
    DealNotFoundError,
    PersistenceError,
    TicketNotFoundError,
    WorkflowRuleNotFoundError,
)
from crm_app.models.activity import Activity
from crm_app.models.customer import Customer
from crm_app.models.deal import Deal
from crm_app.models.ticket import Ticket
from crm_app.models.workflow import WorkflowRule
from crm_app.repositories.activity_repository import ActivityRepository
from crm_app.repositories.base import OwnedRepository
from crm_app.repositories.customer_repository import CustomerRepository
from crm_app.repositories.deal_repository import DealRepository
from crm_app.repositories.ticket_repository import TicketRepository
from crm_app.repositories.workflow_repository import WorkflowRuleRepository

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

# foreign key field -> (repository that owns the referenced row, error if absent)
References = Dict[str, Tuple[OwnedRepository, Type[CRMError]]]


class RecordService(Generic[ModelT]):
    """Owner-scoped CRUD shared by the CRM record types.

    Referenced rows (``customer_id``, ``deal_id``, ...) must belong to the
    same owner; every write invalidates the owner's cached dashboard.
    """

    not_found: ClassVar[Type[CRMError]]
    label: ClassVar[str]

    def __init__(
        self,
        repo: OwnedRepository,
        cache: Optional[CacheService] = None,
        references: Optional[References] = None,
    ) -> None:
        self._repo = repo
        self._cache: CacheService = cache or CacheService()
        self._references: References = references or {}

    async def list(self, owner_id: UUID) -> List[ModelT]:
        return await self._repo.list_by_owner(owner_id)

    async def get(self, owner_id: UUID, record_id: UUID) -> ModelT:
        row = await self._repo.get_for_owner(owner_id, record_id)
        if row is None:
            raise self.not_found()
        return row

    async def create(self, owner_id: UUID, data: BaseModel) -> ModelT:
        fields = self._prepare_create(data.model_dump())
        await self._check_references(owner_id, fields)
        try:
            row = await self._repo.create(owner_id, **fields)
            await self._repo.commit()
        except SQLAlchemyError as exc:
            await self._fail(exc, "create")
        await self._invalidate(owner_id)
        logger.info("Created %s %s for owner %s", self.label, row.id, owner_id)
        return row

    async def update(self, owner_id: UUID, record_id: UUID, data: BaseModel) -> ModelT:
        row = await self.get(owner_id, record_id)
        fields = self._prepare_update(row, data.model_dump(exclude_unset=True))
        await self._check_references(owner_id, fields)
        try:
            row = await self._repo.update(row, **fields)
            await self._repo.commit()
        except SQLAlchemyError as exc:
            await self._fail(exc, "update")
        await self._invalidate(owner_id)
        return row

    async def delete(self, owner_id: UUID, record_id: UUID) -> None:
        try:
            deleted = await self._repo.delete_for_owner(owner_id, record_id)
            if not deleted:
                raise self.not_found()
            await self._repo.commit()
        except SQLAlchemyError as exc:
            await self._fail(exc, "delete")
        await self._invalidate(owner_id)
        logger.info("Deleted %s %s for owner %s", self.label, record_id, owner_id)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return fields

    def _prepare_update(self, row: ModelT, fields: Dict[str, Any]) -> Dict[str, Any]:
        return fields

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _check_references(self, owner_id: UUID, fields: Dict[str, Any]) -> None:
        for field_name, (repo, error) in self._references.items():
            ref_id = fields.get(field_name)
            if ref_id is None:
                continue
            if await repo.get_for_owner(owner_id, ref_id) is None:
                raise error()

    async def _fail(self, exc: SQLAlchemyError, action: str) -> None:
        logger.error("Failed to %s %s: %s", action, self.label, exc)
        await self._repo.rollback()
        raise PersistenceError(f"Failed to {action} {self.label}") from exc

    async def _invalidate(self, owner_id: UUID) -> None:
        await self._cache.delete(dashboard_key(owner_id))


class CustomerService(RecordService[Customer]):
    not_found = CustomerNotFoundError
    label = "customer"

    def __init__(self, repo: CustomerRepository, cache: Optional[CacheService] = None) -> None:
        super().__init__(repo, cache)


class DealService(RecordService[Deal]):
    not_found = DealNotFoundError
    label = "deal"

    def __init__(
        self,
        repo: DealRepository,
        customer_repo: CustomerRepository,
        cache: Optional[CacheService] = None,
    ) -> None:
        super().__init__(
            repo, cache, references={"customer_id": (customer_repo, CustomerNotFoundError)}
        )

    def _prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        if fields.get("stage") is not None:
            fields["stage"] = getattr(fields["stage"], "value", fields["stage"])
        return fields

    def _prepare_update(self, row: Deal, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._prepare_create(fields)


class TicketService(RecordService[Ticket]):
    """Tickets get ``resolved_at`` stamped on entering Resolved/Closed."""

    not_found = TicketNotFoundError
    label = "ticket"

    def __init__(
        self,
        repo: TicketRepository,
        customer_repo: CustomerRepository,
        cache: Optional[CacheService] = None,
    ) -> None:
        super().__init__(
            repo, cache, references={"customer_id": (customer_repo, CustomerNotFoundError)}
        )

    @staticmethod
    def _plain(fields: Dict[str, Any]) -> Dict[str, Any]:
        for key in ("status", "priority"):
            if fields.get(key) is not None:
                fields[key] = getattr(fields[key], "value", fields[key])
        return fields

    def _prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        fields = self._plain(fields)
        if fields.get("status") in RESOLVED_TICKET_STATUSES:
            fields["resolved_at"] = datetime.now(timezone.utc)
        return fields

    def _prepare_update(self, row: Ticket, fields: Dict[str, Any]) -> Dict[str, Any]:
        fields = self._plain(fields)
        status = fields.get("status")
        if status is None or status == row.status:
            return fields
        if status in RESOLVED_TICKET_STATUSES:
            if row.status not in RESOLVED_TICKET_STATUSES:
                fields["resolved_at"] = datetime.now(timezone.utc)
        else:
            fields["resolved_at"] = None
        return fields


class ActivityService(RecordService[Activity]):
    not_found = ActivityNotFoundError
    label = "activity"

    def __init__(
        self,
        repo: ActivityRepository,
        customer_repo: CustomerRepository,
        deal_repo: DealRepository,
        ticket_repo: TicketRepository,
        cache: Optional[CacheService] = None,
    ) -> None:
        super().__init__(
            repo,
            cache,
            references={
                "customer_id": (customer_repo, CustomerNotFoundError),
                "deal_id": (deal_repo, DealNotFoundError),
                "ticket_id": (ticket_repo, TicketNotFoundError),
            },
        )

    def _prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        if fields.get("type") is not None:
            fields["type"] = getattr(fields["type"], "value", fields["type"])
        return fields

    def _prepare_update(self, row: Activity, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._prepare_create(fields)


class WorkflowRuleService(RecordService[WorkflowRule]):
    """Stored automation rules; toggled with ``is_active`` on update."""

    not_found = WorkflowRuleNotFoundError
    label = "workflow rule"

    def __init__(self, repo: WorkflowRuleRepository) -> None:
        # Workflow rules are not part of the dashboard summary, so no cache
        super().__init__(repo)

    @staticmethod
    def _plain(fields: Dict[str, Any]) -> Dict[str, Any]:
        for key in ("trigger_type", "action_type"):
            if fields.get(key) is not None:
                fields[key] = getattr(fields[key], "value", fields[key])
        return fields

    def _prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._plain(fields)

    def _prepare_update(self, row: WorkflowRule, fields: Dict[str, Any]) -> Dict[str, Any]:
        # Every column is NOT NULL; an explicit null leaves the value as is
        return self._plain({k: v for k, v in fields.items() if v is not None})
