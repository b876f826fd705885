"""SQLAlchemy table metadata for enriched items."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    Index,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
)

from enricher.domain.model import ItemStatus

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "pk": "pk_%(table_name)s",
    }
)

enriched_item_table = Table(
    "enriched_items",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("input_hash", String(64), nullable=False, unique=True),
    Column("input_raw", Text, nullable=False),
    Column("status", Enum(ItemStatus, native_enum=False, length=32), nullable=False),
    Column("overall_score", Float, nullable=True),
    Column("record", JSON, nullable=False),
    Column("approved_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, default=_utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=_utcnow, onupdate=_utcnow),
    Index("ix_enriched_items_status", "status"),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine, checkfirst=True)
