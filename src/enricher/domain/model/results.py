"""Result types produced by the classifier, the media collaborator and the gate."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import ConfidenceLevel, EligibilityBucket, ErrorKind


@dataclass(frozen=True, slots=True, kw_only=True)
class EligibilityResult:
    """Market eligibility of one referenced entity (a compatible device)."""

    entity: str
    bucket: EligibilityBucket
    distinct_trusted_sources: int
    score: float
    sources: tuple[str, ...] = ()
    official_source: bool = False
    meets_confidence_threshold: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class EligibilityReport:
    verified: tuple[EligibilityResult, ...] = ()
    unknown: tuple[EligibilityResult, ...] = ()
    rejected: tuple[EligibilityResult, ...] = ()

    @property
    def results(self) -> tuple[EligibilityResult, ...]:
        return (*self.verified, *self.unknown, *self.rejected)

    @property
    def total(self) -> int:
        return len(self.verified) + len(self.unknown) + len(self.rejected)

    @property
    def mean_score(self) -> float:
        results = self.results
        if not results:
            return 0.0
        return sum(result.score for result in results) / len(results)


@dataclass(frozen=True, slots=True, kw_only=True)
class MediaCheck:
    name: str
    passed: bool
    confidence: float = 1.0
    details: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class MediaValidationResult:
    image_url: str
    checks: tuple[MediaCheck, ...] = ()
    passed: bool = False
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class PipelineIssue:
    """Human-readable blocking issue or validation error."""

    kind: ErrorKind
    message: str
    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ReadinessResult:
    overall_score: float
    is_ready: bool
    component_scores: dict[str, float] = field(default_factory=dict[str, float])
    blocking_issues: tuple[PipelineIssue, ...] = ()
    recommendations: tuple[str, ...] = ()
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW
    estimated_manual_effort_minutes: int = 0
