"""Domain port definitions for adapters."""

from __future__ import annotations

from .collaborators import LogisticsProvider, MediaValidator, ResearchProvider, ResearchResult
from .persistence import EnrichedItemRepository, EnrichmentUnitOfWork, StoredItem

__all__ = [
    "EnrichedItemRepository",
    "EnrichmentUnitOfWork",
    "LogisticsProvider",
    "MediaValidator",
    "ResearchProvider",
    "ResearchResult",
    "StoredItem",
]
