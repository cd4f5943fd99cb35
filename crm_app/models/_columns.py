import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Python-side defaults are set alongside the server defaults so that ids and
# timestamps are populated on the instance right after flush, without a
# refresh round trip (lazy loads are not allowed on AsyncSession).


def uuid_pk() -> Column:
    return Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=func.gen_random_uuid(),
    )


def owner_column() -> Column:
    return Column(UUID(as_uuid=True), nullable=False, index=True)


def created_at_column() -> Column:
    return Column(DateTime(timezone=True), default=utcnow, server_default=func.now())


def updated_at_column() -> Column:
    return Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
