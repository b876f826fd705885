"""Bulk approval decisions and readiness reporting over many items."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from enricher.domain.model import ConfidenceLevel, ErrorKind, FieldName

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from enricher.domain.model import EnrichedItem

UNKNOWN_BRAND = "Unknown"
MINOR_FIXES_SCORE = 0.6
MAJOR_WORK_SCORE = 0.3
TOP_ISSUE_LIMIT = 10


@dataclass(frozen=True, slots=True, kw_only=True)
class BulkCriteria:
    min_score: float = 0.7
    required_confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM
    require_market_verification: bool = True
    require_media_validation: bool = True
    include_brands: frozenset[str] = frozenset()
    exclude_brands: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True, kw_only=True)
class BulkRejection:
    item_id: UUID
    reasons: tuple[str, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class BulkSummary:
    total_evaluated: int
    approved_count: int
    rejected_count: int

    @property
    def approval_rate(self) -> float:
        return self.approved_count / self.total_evaluated if self.total_evaluated else 0.0


@dataclass(frozen=True, slots=True, kw_only=True)
class BulkDecision:
    approved: tuple[UUID, ...]
    rejected: tuple[BulkRejection, ...]
    summary: BulkSummary


def rejection_reasons(item: EnrichedItem, criteria: BulkCriteria) -> list[str]:
    reasons: list[str] = []
    readiness = item.readiness
    if readiness is None:
        return ["Item has not been evaluated for readiness"]

    if readiness.overall_score < criteria.min_score:
        reasons.append(
            f"Readiness score {readiness.overall_score:.0%} below minimum {criteria.min_score:.0%}"
        )
    if readiness.confidence_level.rank < criteria.required_confidence_level.rank:
        reasons.append(
            f"Confidence level {readiness.confidence_level} below "
            f"{criteria.required_confidence_level}"
        )
    if criteria.require_market_verification and not item.eligibility.verified:
        reasons.append("No verified compatible devices")
    if criteria.require_media_validation and not any(r.passed for r in item.media_results):
        reasons.append("No valid product image")

    brand = item.resolved_value(FieldName.BRAND)
    if criteria.include_brands and brand not in criteria.include_brands:
        reasons.append("Brand not in inclusion list")
    if criteria.exclude_brands and brand in criteria.exclude_brands:
        reasons.append("Brand in exclusion list")
    return reasons


def evaluate_bulk(items: Iterable[EnrichedItem], criteria: BulkCriteria) -> BulkDecision:
    approved: list[UUID] = []
    rejected: list[BulkRejection] = []
    for item in items:
        reasons = rejection_reasons(item, criteria)
        if reasons:
            rejected.append(BulkRejection(item_id=item.id, reasons=tuple(reasons)))
        else:
            approved.append(item.id)
    total = len(approved) + len(rejected)
    return BulkDecision(
        approved=tuple(approved),
        rejected=tuple(rejected),
        summary=BulkSummary(
            total_evaluated=total,
            approved_count=len(approved),
            rejected_count=len(rejected),
        ),
    )


class IssueSeverity(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def issue_severity(kind: ErrorKind, field_name: str | None) -> IssueSeverity:
    match kind:
        case ErrorKind.MISSING_MANDATORY_FIELD if field_name in (FieldName.BRAND, FieldName.MODEL):
            return IssueSeverity.HIGH
        case ErrorKind.MARKET_UNVERIFIED | ErrorKind.MISSING_MANDATORY_FIELD:
            return IssueSeverity.MEDIUM
        case _:
            return IssueSeverity.LOW


@dataclass(frozen=True, slots=True, kw_only=True)
class IssueFrequency:
    message: str
    count: int
    severity: IssueSeverity


@dataclass(slots=True, kw_only=True)
class BrandReadiness:
    total: int = 0
    ready: int = 0
    score_sum: float = 0.0

    @property
    def mean_score(self) -> float:
        return self.score_sum / self.total if self.total else 0.0


@dataclass(frozen=True, slots=True, kw_only=True)
class ReadinessReport:
    total_items: int
    ready: int
    needs_minor_fixes: int
    needs_major_work: int
    blocked: int
    mean_score: float
    top_blocking_issues: tuple[IssueFrequency, ...] = ()
    by_brand: dict[str, BrandReadiness] = field(default_factory=dict[str, BrandReadiness])


def readiness_report(items: Sequence[EnrichedItem]) -> ReadinessReport:
    """Summarize readiness across ``items``; unevaluated items count as score 0."""

    ready = minor = major = blocked = 0
    total_score = 0.0
    issues: Counter[tuple[str, ErrorKind, str | None]] = Counter()
    by_brand: dict[str, BrandReadiness] = defaultdict(BrandReadiness)

    for item in items:
        readiness = item.readiness
        score = readiness.overall_score if readiness else 0.0
        is_ready = readiness.is_ready if readiness else False
        total_score += score
        if is_ready:
            ready += 1
        elif score >= MINOR_FIXES_SCORE:
            minor += 1
        elif score >= MAJOR_WORK_SCORE:
            major += 1
        else:
            blocked += 1
        if readiness:
            issues.update(
                (issue.message, issue.kind, issue.field) for issue in readiness.blocking_issues
            )
        brand = by_brand[item.resolved_value(FieldName.BRAND) or UNKNOWN_BRAND]
        brand.total += 1
        brand.ready += int(is_ready)
        brand.score_sum += score

    top = tuple(
        IssueFrequency(message=message, count=count, severity=issue_severity(kind, field_name))
        for (message, kind, field_name), count in issues.most_common(TOP_ISSUE_LIMIT)
    )
    return ReadinessReport(
        total_items=len(items),
        ready=ready,
        needs_minor_fixes=minor,
        needs_major_work=major,
        blocked=blocked,
        mean_score=total_score / len(items) if items else 0.0,
        top_blocking_issues=top,
        by_brand=dict(by_brand),
    )
