from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_app.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository:
    """Thin base class that holds the database session.

    Every concrete repository receives an ``AsyncSession`` at
    construction time so that multiple repositories can share the same
    unit-of-work within a single request.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def flush(self) -> None:
        """Flush pending changes without committing."""
        await self._db.flush()

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self._db.commit()

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        await self._db.rollback()


class OwnedRepository(BaseRepository, Generic[ModelT]):
    """CRUD for tenant tables partitioned by ``user_id``.

    Every query filters by the owner, so one user can never read or
    modify another user's rows through this layer.
    """

    model: ClassVar[Type[Base]]

    async def list_by_owner(self, owner_id: UUID) -> List[ModelT]:
        """Return the owner's rows, newest first."""
        result = await self._db.execute(
            select(self.model)
            .where(self.model.user_id == owner_id)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_for_owner(self, owner_id: UUID, row_id: UUID) -> Optional[ModelT]:
        """Return one row by id if it belongs to *owner_id*, else ``None``."""
        result = await self._db.execute(
            select(self.model).where(
                self.model.id == row_id,
                self.model.user_id == owner_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, owner_id: UUID, **fields: Any) -> ModelT:
        """Insert a new row for *owner_id*; server defaults are loaded back."""
        row = self.model(user_id=owner_id, **fields)
        self._db.add(row)
        await self._db.flush()
        await self._db.refresh(row)
        return row

    async def update(self, row: ModelT, **fields: Any) -> ModelT:
        """Replace the given fields on *row* (partial update)."""
        for name, value in fields.items():
            setattr(row, name, value)
        if hasattr(row, "updated_at"):
            row.updated_at = datetime.now(timezone.utc)
        await self._db.flush()
        return row

    async def delete_for_owner(self, owner_id: UUID, row_id: UUID) -> bool:
        """Delete one row; return ``False`` when nothing matched."""
        result = await self._db.execute(
            delete(self.model).where(
                self.model.id == row_id,
                self.model.user_id == owner_id,
            )
        )
        return bool(result.rowcount)
