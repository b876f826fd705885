"""Per-item orchestration of extraction, research, resolution and gating.

Stage machine per item::

    received -> normalizing -> researching -> resolving -> classifying -> gating
             -> ok | needs_review | failed

Every transition appends exactly one audit entry. Runs are coalesced by
``input_hash``: a duplicate submission awaits the run already in flight and a
finished item is returned from memory, so every logical input is processed
and persisted once per coordinator. That memory holds every finished item
until :meth:`Coordinator.clear_completed` is called.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from enricher.domain.eligibility import classify_entities, ensure_valid_policy, get_policy
from enricher.domain.extraction import extract_claims
from enricher.domain.model import (
    AuditAction,
    EnrichedItem,
    ErrorKind,
    FallbackResearchSource,
    FieldName,
    ItemStatus,
    PipelineIssue,
    PipelineStage,
)
from enricher.domain.readiness import ReadinessConfig, evaluate_readiness
from enricher.domain.resolution import TrustPolicy, resolve_ledger

from .collaborators import CallOutcome, PipelineSettings, Sleep, call_collaborator
from .identity import input_hash

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Generator, Iterable

    from enricher.domain.eligibility import MarketPolicy
    from enricher.domain.extraction import ExtractionResult
    from enricher.domain.model import Claim, MediaValidationResult
    from enricher.domain.ports import (
        EnrichmentUnitOfWork,
        LogisticsProvider,
        MediaValidator,
        ResearchProvider,
        ResearchResult,
    )

log = getLogger(__name__)

RESEARCH = "research"
LOGISTICS = "logistics"
LOGISTICS_FALLBACK = "logistics_fallback"
MEDIA = "media"


class PipelineHandle:
    """Handle on a submitted item.

    The run may be cancelled while it still waits for a worker slot; once it
    has started, :meth:`cancel` returns ``False`` and the run completes.
    """

    def __init__(self, input_hash: str) -> None:
        self.input_hash = input_hash
        self._task: asyncio.Task[EnrichedItem] | None = None
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def cancelled(self) -> bool:
        return self._task is not None and self._task.cancelled()

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def attach(self, task: asyncio.Task[EnrichedItem]) -> None:
        self._task = task

    def mark_started(self) -> None:
        self._started = True

    def cancel(self) -> bool:
        if self._task is None or self._started or self._task.done():
            return False
        return self._task.cancel()

    async def result(self) -> EnrichedItem:
        if self._task is None:
            raise RuntimeError(f"No run attached for {self.input_hash[:12]}")
        return await self._task

    def __await__(self) -> Generator[object, None, EnrichedItem]:
        return self.result().__await__()


@dataclass(slots=True)
class _ResearchRound:
    outcomes: list[CallOutcome[object]] = field(default_factory=list["CallOutcome[object]"])
    claims: list[Claim] = field(default_factory=list["Claim"])

    @property
    def all_unavailable(self) -> bool:
        return bool(self.outcomes) and all(
            outcome.error is ErrorKind.COLLABORATOR_UNAVAILABLE for outcome in self.outcomes
        )


class Coordinator:
    """Drive items through the enrichment pipeline with bounded concurrency."""

    def __init__(
        self,
        *,
        research: ResearchProvider,
        logistics: LogisticsProvider,
        media: MediaValidator | None = None,
        trust_policy: TrustPolicy | None = None,
        market_policy: MarketPolicy | None = None,
        readiness_config: ReadinessConfig | None = None,
        settings: PipelineSettings | None = None,
        unit_of_work_factory: Callable[[], EnrichmentUnitOfWork] | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.research = research
        self.logistics = logistics
        self.media = media
        self.trust_policy = trust_policy or TrustPolicy()
        self.market_policy = ensure_valid_policy(market_policy or get_policy())
        self.readiness_config = readiness_config or ReadinessConfig()
        self.settings = settings or PipelineSettings()
        self._unit_of_work_factory = unit_of_work_factory
        self._sleep = sleep
        self._semaphore: asyncio.Semaphore | None = None
        self._semaphore_loop: asyncio.AbstractEventLoop | None = None
        self._inflight: dict[str, PipelineHandle] = {}
        self._completed: dict[str, EnrichedItem] = {}

    # ------------------------------------------------------------------ entry points

    def submit(self, raw: str) -> PipelineHandle:
        """Queue ``raw`` for processing; must be called from a running loop."""

        key = input_hash(raw)
        existing = self._inflight.get(key)
        if existing is not None:
            log.debug("Coalescing duplicate submission %s", key[:12])
            return existing

        handle = PipelineHandle(key)
        loop = asyncio.get_running_loop()
        completed = self._completed.get(key)
        if completed is not None:
            handle.mark_started()
            handle.attach(loop.create_task(_already_done(completed)))
            return handle

        task = loop.create_task(self._run_queued(raw, handle))
        handle.attach(task)
        self._inflight[key] = handle
        task.add_done_callback(lambda _: self._inflight.pop(key, None))
        return handle

    async def enrich(self, raw: str) -> EnrichedItem:
        completed = self._completed.get(input_hash(raw))
        if completed is not None:
            return completed
        return await self.submit(raw)

    async def enrich_many(self, raws: Iterable[str]) -> list[EnrichedItem]:
        return list(await asyncio.gather(*(self.enrich(raw) for raw in raws)))

    def run(self, raws: Iterable[str]) -> list[EnrichedItem]:
        """Synchronous wrapper around :meth:`enrich_many`."""

        return asyncio.run(self.enrich_many(list(raws)))

    def clear_completed(self) -> int:
        """Forget finished items so that their inputs are processed again.

        Returns the number of items dropped. Runs still in flight are kept.
        """

        dropped = len(self._completed)
        self._completed.clear()
        return dropped

    # ------------------------------------------------------------------ run

    def _worker_slots(self) -> asyncio.Semaphore:
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self.settings.max_concurrent_items)
            self._semaphore_loop = loop
        return self._semaphore

    async def _run_queued(self, raw: str, handle: PipelineHandle) -> EnrichedItem:
        async with self._worker_slots():
            handle.mark_started()
            return await self._process(raw, handle.input_hash)

    async def _process(self, raw: str, key: str) -> EnrichedItem:
        item = EnrichedItem(input_raw=raw, input_hash=key)
        try:
            await self._drive(item)
        except Exception as exc:
            log.exception("Pipeline failed for %s", key[:12])
            item.add_issue(
                PipelineIssue(kind=ErrorKind.PIPELINE_ERROR, message=f"Pipeline error: {exc}")
            )
            item.status = ItemStatus.FAILED
            if item.stage is not PipelineStage.FAILED:
                item.transition(PipelineStage.FAILED)

        self._completed[key] = item
        self._persist(item)
        log.info(
            "Item %s finished as %s (score=%s)",
            key[:12],
            item.status,
            f"{item.readiness.overall_score:.3f}" if item.readiness else "n/a",
        )
        return item

    async def _drive(self, item: EnrichedItem) -> None:
        self._advance(item, PipelineStage.NORMALIZING)
        extraction = extract_claims(item.input_raw)
        for claim in extraction.claims:
            item.record_claim(claim)
        for issue in extraction.issues:
            item.add_issue(issue)

        self._advance(item, PipelineStage.RESEARCHING)
        research = await self._research(item, extraction)
        for claim in research.claims:
            item.record_claim(claim)

        self._advance(item, PipelineStage.RESOLVING)
        resolved = resolve_ledger(
            item.evidence_ledger, policy=self.trust_policy, record=item.record_resolution
        )
        for name, evidence in resolved.items():
            if evidence.is_conflict:
                item.add_issue(
                    PipelineIssue(
                        kind=ErrorKind.SOURCE_CONFLICT,
                        message=f"Top-tier sources disagree on {name}; provisional value "
                        f"{evidence.value!r} needs review",
                        field=name,
                    )
                )
        item.media_results = await self._validate_media(item)

        self._advance(item, PipelineStage.CLASSIFYING)
        item.eligibility = classify_entities(
            item.evidence_ledger.claims_for(FieldName.COMPATIBLE_DEVICE),
            policy=self.market_policy,
        )
        item.audit(
            AuditAction.ELIGIBILITY_CLASSIFIED,
            field=FieldName.COMPATIBLE_DEVICE,
            after=(
                f"verified={len(item.eligibility.verified)} "
                f"unknown={len(item.eligibility.unknown)} "
                f"rejected={len(item.eligibility.rejected)}"
            ),
            source=self.market_policy.name,
        )

        self._advance(item, PipelineStage.GATING)
        readiness = evaluate_readiness(
            item.resolved_fields,
            item.eligibility,
            item.media_results,
            config=self.readiness_config,
        )
        item.readiness = readiness
        item.audit(
            AuditAction.READINESS_EVALUATED,
            after=f"{readiness.overall_score:.3f}",
            source="ready" if readiness.is_ready else "not_ready",
        )
        for issue in readiness.blocking_issues:
            item.add_issue(issue)

        item.status = self._terminal_status(item, research)
        self._advance(item, PipelineStage(item.status.value))

    def _terminal_status(self, item: EnrichedItem, research: _ResearchRound) -> ItemStatus:
        if research.all_unavailable:
            return ItemStatus.FAILED
        readiness = item.readiness
        missing = any(
            item.resolved_value(name) is None for name in self.readiness_config.mandatory_fields
        )
        conflicted = any(evidence.is_conflict for evidence in item.resolved_fields.values())
        ambiguous = any(issue.kind is ErrorKind.EXTRACTION_AMBIGUOUS for issue in item.issues)
        if missing or conflicted or ambiguous or readiness is None or not readiness.is_ready:
            return ItemStatus.NEEDS_REVIEW
        return ItemStatus.OK

    def _advance(self, item: EnrichedItem, stage: PipelineStage) -> None:
        log.debug("Item %s: %s -> %s", item.input_hash[:12], item.stage, stage)
        item.transition(stage)

    # ------------------------------------------------------------------ collaborators

    async def _research(self, item: EnrichedItem, extraction: ExtractionResult) -> _ResearchRound:
        """Research and logistics in parallel, then the logistics fallback if needed."""

        model = extraction.model.model
        brand = extraction.brand.brand
        research_outcome, logistics_outcome = await asyncio.gather(
            self._call(RESEARCH, lambda: self.research.query(extraction.canonical_title)),
            self._lookup_logistics(model, brand),
        )

        round_ = _ResearchRound()
        round_.outcomes.append(research_outcome)
        self._note_failure(item, research_outcome)
        if research_outcome.ok and research_outcome.value is not None:
            round_.claims.extend(research_outcome.value.candidate_claims)

        if logistics_outcome is not None:
            round_.outcomes.append(logistics_outcome)
            self._note_failure(item, logistics_outcome)
            if logistics_outcome.ok and logistics_outcome.value is not None:
                round_.claims.append(logistics_outcome.value)
                return round_

        fallback = await self._logistics_fallback(item, extraction)
        round_.outcomes.append(fallback)
        self._note_failure(item, fallback)
        if fallback.ok and fallback.value is not None:
            round_.claims.extend(
                claim.retagged(FallbackResearchSource(domain=claim.source_domain))
                for claim in fallback.value.candidate_claims
            )
        return round_

    async def _lookup_logistics(self, model: str, brand: str) -> CallOutcome[Claim | None] | None:
        if not model:
            return None
        return await self._call(LOGISTICS, lambda: self.logistics.lookup(model, brand))

    async def _logistics_fallback(
        self, item: EnrichedItem, extraction: ExtractionResult
    ) -> CallOutcome[ResearchResult]:
        subject = " ".join(
            part for part in (extraction.brand.brand, extraction.model.model) if part
        ) or extraction.canonical_title
        query = f"{subject} packaging weight dimensions"
        log.warning("Logistics lookup gave nothing for %r; falling back to research", subject)
        item.audit(
            AuditAction.FALLBACK_USED, field=FieldName.PACKAGING, after=query, source=RESEARCH
        )
        return await self._call(LOGISTICS_FALLBACK, lambda: self.research.query(query))

    async def _validate_media(self, item: EnrichedItem) -> tuple[MediaValidationResult, ...]:
        model = item.resolved_value(FieldName.MODEL)
        if self.media is None or not model or self.settings.max_images == 0:
            return ()
        urls: dict[str, None] = {}
        for claim in item.evidence_ledger.claims_for(FieldName.IMAGE_URL):
            urls.setdefault(claim.value.strip(), None)
        selected = [url for url in urls if url][: self.settings.max_images]
        if not selected:
            return ()

        media = self.media
        outcomes = await asyncio.gather(
            *(
                self._call(MEDIA, partial(media.validate, url, model))
                for url in selected
            )
        )
        results: list[MediaValidationResult] = []
        for url, outcome in zip(selected, outcomes, strict=True):
            self._note_failure(item, outcome)
            if outcome.ok and outcome.value is not None:
                results.append(outcome.value)
                item.audit(
                    AuditAction.MEDIA_VALIDATED,
                    field=FieldName.IMAGE_URL,
                    before=url,
                    after="passed" if outcome.value.passed else "failed",
                    source=MEDIA,
                )
        return tuple(results)

    async def _call[T](
        self, collaborator: str, call: Callable[[], Awaitable[T]]
    ) -> CallOutcome[T]:
        return await call_collaborator(
            collaborator, call, settings=self.settings, sleep=self._sleep
        )

    def _note_failure(self, item: EnrichedItem, outcome: CallOutcome[object]) -> None:
        error = outcome.error
        if error is None:
            return
        item.audit(
            AuditAction.COLLABORATOR_FAILED,
            before=error,
            after=outcome.message,
            source=outcome.collaborator,
        )
        item.add_issue(
            PipelineIssue(
                kind=error,
                message=f"{outcome.collaborator} failed after {outcome.attempts} attempt(s): "
                f"{outcome.message}",
            )
        )

    # ------------------------------------------------------------------ persistence

    def _persist(self, item: EnrichedItem) -> None:
        if self._unit_of_work_factory is None:
            return
        try:
            with self._unit_of_work_factory() as uow:
                uow.items.add(item)
                uow.commit()
        except Exception as exc:
            # The item is still returned; only the stored copy is missing.
            log.exception("Persisting item %s failed", item.input_hash[:12])
            item.add_issue(
                PipelineIssue(
                    kind=ErrorKind.PERSISTENCE_FAILED,
                    message=f"Item could not be stored: {exc}",
                )
            )


async def _already_done(item: EnrichedItem) -> EnrichedItem:
    return item
