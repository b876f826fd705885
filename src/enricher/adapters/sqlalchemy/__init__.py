"""SQLAlchemy adapter package for enriched items."""

from __future__ import annotations

from .mappings import create_all_tables, enriched_item_table, metadata
from .repositories import SqlAlchemyEnrichedItemRepository
from .unit_of_work import (
    SqlAlchemyEnrichmentUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyEnrichedItemRepository",
    "SqlAlchemyEnrichmentUnitOfWork",
    "StartupError",
    "create_all_tables",
    "enriched_item_table",
    "metadata",
    "is_started",
    "shutdown",
    "startup",
]
