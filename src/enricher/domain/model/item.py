"""Enriched item aggregate and its audit trail."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import NAMESPACE_URL, UUID, uuid5

from .enums import AuditAction, ItemStatus, PipelineStage
from .evidence import EvidenceLedger
from .results import EligibilityReport

if TYPE_CHECKING:
    from .claims import Claim
    from .evidence import FieldEvidence
    from .results import MediaValidationResult, PipelineIssue, ReadinessResult

_ITEM_NAMESPACE = uuid5(NAMESPACE_URL, "urn:enricher:item")


class FrozenItemError(RuntimeError):
    """Raised when an approved item is mutated."""


def item_id_for(input_hash: str) -> UUID:
    """Stable item identity derived from the input hash."""

    return uuid5(_ITEM_NAMESPACE, input_hash)


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditTrailEntry:
    action: AuditAction
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    field: str | None = None
    before: str | None = None
    after: str | None = None
    source: str | None = None


@dataclass(eq=False, kw_only=True)
class EnrichedItem:
    """Aggregate for one logical input.

    The ledger, resolutions and audit trail are owned by a single pipeline
    run. After :meth:`freeze` every mutator raises :class:`FrozenItemError`.
    """

    input_raw: str
    input_hash: str
    id: UUID = field(init=False)
    status: ItemStatus = ItemStatus.NEEDS_REVIEW
    stage: PipelineStage = PipelineStage.RECEIVED
    evidence_ledger: EvidenceLedger = field(default_factory=EvidenceLedger)
    eligibility: EligibilityReport = field(default_factory=EligibilityReport)
    media_results: tuple[MediaValidationResult, ...] = ()
    readiness: ReadinessResult | None = None
    issues: list[PipelineIssue] = field(default_factory=list["PipelineIssue"])
    approved_at: datetime | None = None
    _audit_trail: list[AuditTrailEntry] = field(
        default_factory=list[AuditTrailEntry], init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.id = item_id_for(self.input_hash)

    @property
    def audit_trail(self) -> tuple[AuditTrailEntry, ...]:
        return tuple(self._audit_trail)

    @property
    def is_frozen(self) -> bool:
        return self.approved_at is not None

    @property
    def resolved_fields(self) -> dict[str, FieldEvidence]:
        return self.evidence_ledger.resolutions

    def resolved_value(self, field_name: str) -> str | None:
        evidence = self.evidence_ledger.resolution(field_name)
        if evidence is None or not evidence.is_resolved:
            return None
        return evidence.value

    def audit(
        self,
        action: AuditAction,
        *,
        field: str | None = None,
        before: str | None = None,
        after: str | None = None,
        source: str | None = None,
    ) -> AuditTrailEntry:
        entry = AuditTrailEntry(
            action=action, field=field, before=before, after=after, source=source
        )
        self._audit_trail.append(entry)
        return entry

    def transition(self, stage: PipelineStage) -> None:
        self._ensure_mutable()
        previous = self.stage
        self.stage = stage
        self.audit(
            AuditAction.STAGE_TRANSITION,
            before=previous.value,
            after=stage.value,
            source="coordinator",
        )

    def record_claim(self, claim: Claim) -> None:
        self._ensure_mutable()
        self.evidence_ledger.append(claim)
        self.audit(
            AuditAction.CLAIM_RECORDED,
            field=claim.field,
            after=claim.value,
            source=f"{claim.source_type.value}:{claim.source_domain}",
        )

    def record_resolution(self, evidence: FieldEvidence) -> None:
        self._ensure_mutable()
        previous = self.evidence_ledger.record_resolution(evidence)
        if previous == evidence:
            return
        self.audit(
            AuditAction.FIELD_RESOLVED,
            field=evidence.field,
            before=previous.value if previous is not None else None,
            after=evidence.value,
            source=evidence.method.value,
        )

    def add_issue(self, issue: PipelineIssue) -> None:
        if issue not in self.issues:
            self.issues.append(issue)

    def freeze(self, *, at: datetime | None = None) -> None:
        self._ensure_mutable()
        self.approved_at = at or datetime.now(tz=UTC)

    def _ensure_mutable(self) -> None:
        if self.is_frozen:
            raise FrozenItemError(f"Item {self.id} is approved and can no longer change")

    def to_record(self) -> dict[str, object]:
        """Stable, JSON-ready record shape consumed by review and persistence."""

        ledger = self.evidence_ledger
        return {
            "id": str(self.id),
            "input_raw": self.input_raw,
            "input_hash": self.input_hash,
            "status": self.status.value,
            "resolved_fields": {
                name: evidence.value
                for name, evidence in ledger.resolutions.items()
                if evidence.is_resolved
            },
            "evidence_ledger": {
                name: _evidence_record(evidence) for name, evidence in ledger.resolutions.items()
            },
            "claims": [_claim_record(claim) for claim in ledger.all_claims()],
            "eligibility_results": [
                {
                    "entity": result.entity,
                    "bucket": result.bucket.value,
                    "distinct_trusted_sources": result.distinct_trusted_sources,
                    "score": result.score,
                    "sources": list(result.sources),
                    "official_source": result.official_source,
                    "meets_confidence_threshold": result.meets_confidence_threshold,
                }
                for result in self.eligibility.results
            ],
            "media_results": [
                {
                    "image_url": result.image_url,
                    "passed": result.passed,
                    "reasons": list(result.reasons),
                    "checks": [
                        {
                            "name": check.name,
                            "passed": check.passed,
                            "confidence": check.confidence,
                            "details": check.details,
                        }
                        for check in result.checks
                    ],
                }
                for result in self.media_results
            ],
            "readiness": _readiness_record(self.readiness),
            "audit_trail": [
                {
                    "timestamp": entry.timestamp.isoformat(),
                    "action": entry.action.value,
                    "field": entry.field,
                    "before": entry.before,
                    "after": entry.after,
                    "source": entry.source,
                }
                for entry in self._audit_trail
            ],
            "issues": [_issue_record(issue) for issue in self.issues],
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
        }


def _claim_record(claim: Claim) -> dict[str, object]:
    return {
        "claim_id": str(claim.claim_id),
        "field": claim.field,
        "value": claim.value,
        "source_type": claim.source_type.value,
        "source_domain": claim.source_domain,
        "confidence": claim.confidence,
        "extraction_method": claim.extraction_method,
        "extracted_at": claim.extracted_at.isoformat(),
    }


def _evidence_record(evidence: FieldEvidence) -> dict[str, object]:
    return {
        "value": evidence.value,
        "method": evidence.method.value,
        "confidence": evidence.confidence,
        "tier": evidence.tier.name.lower(),
        "is_conflict": evidence.is_conflict,
        "contributing_claims": [str(claim.claim_id) for claim in evidence.contributing_claims],
    }


def _issue_record(issue: PipelineIssue) -> dict[str, object]:
    return {"kind": issue.kind.value, "message": issue.message, "field": issue.field}


def _readiness_record(readiness: ReadinessResult | None) -> dict[str, object] | None:
    if readiness is None:
        return None
    return {
        "overall_score": readiness.overall_score,
        "is_ready": readiness.is_ready,
        "component_scores": dict(readiness.component_scores),
        "blocking_issues": [_issue_record(issue) for issue in readiness.blocking_issues],
        "recommendations": list(readiness.recommendations),
        "confidence_level": readiness.confidence_level.value,
        "estimated_manual_effort_minutes": readiness.estimated_manual_effort_minutes,
    }
