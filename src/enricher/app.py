"""Application wiring: gateway adapters, persistence and the coordinator."""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from enricher.adapters.gateway import (
    GatewayLogisticsProvider,
    GatewayMediaValidator,
    GatewayResearchProvider,
)
from enricher.adapters.http_resilience import ResilientClient
from enricher.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyEnrichmentUnitOfWork,
    is_started,
    startup,
)
from enricher.config import (
    get_gateway_config,
    get_market_policy,
    get_pipeline_settings,
    get_readiness_config,
    get_storage_config,
)
from enricher.domain.pipeline import Coordinator

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from enricher.config import GatewayConfig, ResilienceConfig
    from enricher.domain.model import EnrichedItem, ItemStatus
    from enricher.domain.ports import EnrichmentUnitOfWork, StoredItem

type UnitOfWorkFactory = Callable[[], EnrichmentUnitOfWork]
type ClientFactory = Callable[[ResilienceConfig], ResilientClient]

log = getLogger(__name__)


@dataclass(slots=True)
class GatewayCollaborators:
    research: GatewayResearchProvider
    logistics: GatewayLogisticsProvider
    media: GatewayMediaValidator

    async def aclose(self) -> None:
        await asyncio.gather(
            self.research.aclose(), self.logistics.aclose(), self.media.aclose()
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class StoredSummary:
    total: int
    by_status: dict[str, int]
    mean_score: float


def build_gateway_collaborators(
    gateway: GatewayConfig | None = None,
    *,
    client_factory: ClientFactory = ResilientClient,
) -> GatewayCollaborators:
    config = gateway or get_gateway_config(storage=get_storage_config())
    return GatewayCollaborators(
        research=GatewayResearchProvider(config.research, client_factory),
        logistics=GatewayLogisticsProvider(config.logistics, client_factory),
        media=GatewayMediaValidator(config.media, client_factory),
    )


def build_coordinator(
    collaborators: GatewayCollaborators,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Coordinator:
    """Coordinator configured from the environment."""

    return Coordinator(
        research=collaborators.research,
        logistics=collaborators.logistics,
        media=collaborators.media,
        market_policy=get_market_policy(),
        readiness_config=get_readiness_config(),
        settings=get_pipeline_settings(),
        unit_of_work_factory=unit_of_work_factory,
    )


def enrich_titles(
    titles: Sequence[str],
    *,
    collaborators: GatewayCollaborators | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    persist: bool = True,
) -> list[EnrichedItem]:
    """Enrich supplier titles end to end and persist the finished items."""

    if persist and unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyEnrichmentUnitOfWork
    effective = collaborators or build_gateway_collaborators()
    coordinator = build_coordinator(
        effective, unit_of_work_factory=unit_of_work_factory if persist else None
    )
    log.info("Starting enrichment of %d titles", len(titles))

    async def run() -> list[EnrichedItem]:
        try:
            return await coordinator.enrich_many(titles)
        finally:
            await effective.aclose()

    items = asyncio.run(run())
    statuses = Counter(item.status.value for item in items)
    log.info(
        "Finished enrichment: %s",
        ", ".join(f"{status}={count}" for status, count in sorted(statuses.items())) or "nothing",
    )
    return items


def list_stored_items(
    *,
    status: ItemStatus | None = None,
    limit: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> tuple[list[StoredItem], StoredSummary]:
    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyEnrichmentUnitOfWork

    with unit_of_work_factory() as uow:
        stored = list(uow.items.list(status=status, limit=limit))

    scores = [item.overall_score for item in stored if item.overall_score is not None]
    summary = StoredSummary(
        total=len(stored),
        by_status=dict(Counter(item.status.value for item in stored)),
        mean_score=sum(scores) / len(scores) if scores else 0.0,
    )
    return stored, summary
