"""Repository implementation backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from enricher.adapters.sqlalchemy.mappings import enriched_item_table
from enricher.domain.model import ItemStatus
from enricher.domain.ports.persistence import StoredItem

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from enricher.domain.model import EnrichedItem

log = getLogger(__name__)


class SqlAlchemyEnrichedItemRepository:
    """Stores one row per logical input; re-adding an input overwrites its row."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, item: EnrichedItem) -> StoredItem:
        values = {
            "input_raw": item.input_raw,
            "status": item.status,
            "overall_score": item.readiness.overall_score if item.readiness else None,
            "record": item.to_record(),
            "approved_at": item.approved_at,
        }
        existing = self.session.execute(
            select(enriched_item_table.c.id).where(
                enriched_item_table.c.input_hash == item.input_hash
            )
        ).scalar_one_or_none()

        if existing is None:
            self.session.execute(
                enriched_item_table.insert().values(
                    id=item.id, input_hash=item.input_hash, **values
                )
            )
        else:
            log.debug("Replacing stored record for %s", item.input_hash[:12])
            self.session.execute(
                enriched_item_table.update()
                .where(enriched_item_table.c.id == existing)
                .values(**values)
            )

        row = self.session.execute(
            select(enriched_item_table).where(enriched_item_table.c.input_hash == item.input_hash)
        ).one()
        return _stored(row)

    def get_by_hash(self, input_hash: str) -> StoredItem | None:
        row = self.session.execute(
            select(enriched_item_table).where(enriched_item_table.c.input_hash == input_hash)
        ).one_or_none()
        return _stored(row) if row is not None else None

    def list(
        self, *, status: ItemStatus | None = None, limit: int | None = None
    ) -> Sequence[StoredItem]:
        stmt = select(enriched_item_table).order_by(
            enriched_item_table.c.created_at, enriched_item_table.c.input_hash
        )
        if status is not None:
            stmt = stmt.where(enriched_item_table.c.status == status)
        if limit is not None:
            stmt = stmt.limit(limit)
        return [_stored(row) for row in self.session.execute(stmt)]


def _stored(row: Row[tuple[object, ...]]) -> StoredItem:
    mapping = row._mapping  # noqa: SLF001
    return StoredItem(
        id=mapping["id"],
        input_hash=mapping["input_hash"],
        input_raw=mapping["input_raw"],
        status=ItemStatus(mapping["status"]),
        overall_score=mapping["overall_score"],
        record=cast(dict[str, object], mapping["record"]),
        created_at=mapping["created_at"],
        updated_at=mapping["updated_at"],
    )


if TYPE_CHECKING:
    from enricher.domain.ports.persistence import EnrichedItemRepository

    _session_stub = cast("Session", object())
    _repo_check: EnrichedItemRepository = SqlAlchemyEnrichedItemRepository(_session_stub)
