"""Ports for persisting enriched items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from types import TracebackType
    from uuid import UUID

    from enricher.domain.model import EnrichedItem, ItemStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class StoredItem:
    """Persisted snapshot of an enriched item's record."""

    id: UUID
    input_hash: str
    input_raw: str
    status: ItemStatus
    overall_score: float | None
    record: dict[str, object] = field(default_factory=dict[str, object])
    created_at: datetime | None = None
    updated_at: datetime | None = None


@runtime_checkable
class EnrichedItemRepository(Protocol):
    """Persistence contract for enriched items, keyed by input hash."""

    def add(self, item: EnrichedItem) -> StoredItem: ...

    def get_by_hash(self, input_hash: str) -> StoredItem | None: ...

    def list(
        self, *, status: ItemStatus | None = None, limit: int | None = None
    ) -> Sequence[StoredItem]: ...


@runtime_checkable
class EnrichmentUnitOfWork(Protocol):
    """Unit-of-work boundary around the enriched item repository."""

    @property
    def items(self) -> EnrichedItemRepository: ...

    def __enter__(self) -> EnrichmentUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


__all__ = ["EnrichedItemRepository", "EnrichmentUnitOfWork", "StoredItem"]
