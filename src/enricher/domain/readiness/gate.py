"""Publication readiness gate.

``overall_score`` is the weighted sum of five independent components:

============================  =====================================================
component                     meaning
============================  =====================================================
``required_fields``           fraction of mandatory fields with a resolved value
``data_quality``              mean resolved confidence, minus 0.1 per conflict
``market_compliance``         fraction of referenced devices that are verified
``media_validation``          fraction of media checks that passed
``source_reliability``        mean tier weight of the claims behind resolutions
============================  =====================================================

The gate is pure: identical inputs always produce an identical result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from enricher.domain.model import (
    ConfidenceLevel,
    ConsumableType,
    ErrorKind,
    FieldName,
    PipelineIssue,
    ReadinessResult,
    TrustTier,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from enricher.domain.model import EligibilityReport, FieldEvidence, MediaValidationResult

log = getLogger(__name__)

REQUIRED_FIELDS = "required_fields"
DATA_QUALITY = "data_quality"
MARKET_COMPLIANCE = "market_compliance"
MEDIA_VALIDATION = "media_validation"
SOURCE_RELIABILITY = "source_reliability"

CONFLICT_QUALITY_PENALTY = 0.1
MINUTES_PER_BLOCKING_ISSUE = 15
MINUTES_PER_RECOMMENDATION = 5
MARKET_RESEARCH_MINUTES = 30
MAX_EFFORT_MINUTES = 120

DEFAULT_TIER_WEIGHTS: Mapping[TrustTier, float] = MappingProxyType(
    {
        TrustTier.MANUAL: 1.0,
        TrustTier.OFFICIAL: 1.0,
        TrustTier.CURATED: 0.85,
        TrustTier.SUPPLIER: 0.7,
        TrustTier.GENERIC: 0.4,
    }
)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReadinessWeights:
    """Weight vector over the component scores; must sum to 1."""

    required_fields: float = 0.4
    data_quality: float = 0.25
    market_compliance: float = 0.15
    media_validation: float = 0.1
    source_reliability: float = 0.1

    def __post_init__(self) -> None:
        values = self.as_dict()
        negative = [name for name, value in values.items() if value < 0]
        if negative:
            raise ValueError(f"Readiness weights must not be negative: {', '.join(negative)}")
        total = sum(values.values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Readiness weights must sum to 1, got {total:.4f}")

    def as_dict(self) -> dict[str, float]:
        return {
            REQUIRED_FIELDS: self.required_fields,
            DATA_QUALITY: self.data_quality,
            MARKET_COMPLIANCE: self.market_compliance,
            MEDIA_VALIDATION: self.media_validation,
            SOURCE_RELIABILITY: self.source_reliability,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class ReadinessConfig:
    weights: ReadinessWeights = field(default_factory=ReadinessWeights)
    threshold: float = 0.7
    mandatory_fields: tuple[str, ...] = (
        FieldName.BRAND,
        FieldName.MODEL,
        FieldName.CONSUMABLE_TYPE,
    )
    require_media: bool = True
    tier_weights: Mapping[TrustTier, float] = field(default_factory=lambda: DEFAULT_TIER_WEIGHTS)


def evaluate_readiness(
    resolved_fields: Mapping[str, FieldEvidence],
    eligibility: EligibilityReport,
    media_results: Sequence[MediaValidationResult],
    *,
    config: ReadinessConfig,
) -> ReadinessResult:
    resolved = {name: ev for name, ev in resolved_fields.items() if ev.is_resolved}

    missing = [name for name in config.mandatory_fields if name not in resolved]
    required_score = (
        1.0 - len(missing) / len(config.mandatory_fields) if config.mandatory_fields else 1.0
    )

    conflicts = sorted(name for name, ev in resolved.items() if ev.is_conflict)
    if resolved:
        mean_confidence = sum(ev.confidence for ev in resolved.values()) / len(resolved)
        quality_score = max(0.0, mean_confidence - CONFLICT_QUALITY_PENALTY * len(conflicts))
    else:
        quality_score = 0.0

    market_score = len(eligibility.verified) / eligibility.total if eligibility.total else 0.0
    media_score, passing_media = _media_score(media_results, require_media=config.require_media)

    tiers = [ev.tier for ev in resolved.values() for _ in ev.contributing_claims]
    reliability_score = (
        sum(config.tier_weights.get(tier, 0.0) for tier in tiers) / len(tiers) if tiers else 0.0
    )

    components = {
        REQUIRED_FIELDS: required_score,
        DATA_QUALITY: quality_score,
        MARKET_COMPLIANCE: market_score,
        MEDIA_VALIDATION: media_score,
        SOURCE_RELIABILITY: reliability_score,
    }
    weights = config.weights.as_dict()
    overall = max(0.0, min(1.0, sum(weights[name] * score for name, score in components.items())))

    blocking = [
        PipelineIssue(
            kind=ErrorKind.MISSING_MANDATORY_FIELD,
            message=f"Missing mandatory field: {name}",
            field=name,
        )
        for name in missing
    ]
    if not eligibility.verified:
        blocking.append(
            PipelineIssue(
                kind=ErrorKind.MARKET_UNVERIFIED,
                message="No compatible device is verified by enough trusted sources",
                field=FieldName.COMPATIBLE_DEVICE,
            )
        )
    if config.require_media and passing_media == 0:
        blocking.append(
            PipelineIssue(
                kind=ErrorKind.MEDIA_UNVERIFIED,
                message="No product image passed media validation",
                field=FieldName.IMAGE_URL,
            )
        )

    recommendations = _recommendations(resolved, components, media_results, conflicts)
    is_ready = overall >= config.threshold and not blocking
    result = ReadinessResult(
        overall_score=overall,
        is_ready=is_ready,
        component_scores=components,
        blocking_issues=tuple(blocking),
        recommendations=tuple(recommendations),
        confidence_level=confidence_level_for((overall + quality_score) / 2),
        estimated_manual_effort_minutes=estimate_manual_effort(blocking, recommendations),
    )
    log.debug("Readiness %.3f (ready=%s, blocking=%d)", overall, is_ready, len(blocking))
    return result


def confidence_level_for(score: float) -> ConfidenceLevel:
    if score >= 0.8:
        return ConfidenceLevel.HIGH
    if score >= 0.6:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def estimate_manual_effort(
    blocking: Sequence[PipelineIssue],
    recommendations: Sequence[str],
) -> int:
    effort = MINUTES_PER_BLOCKING_ISSUE * len(blocking)
    effort += MINUTES_PER_RECOMMENDATION * len(recommendations)
    effort += MARKET_RESEARCH_MINUTES * sum(
        1 for issue in blocking if issue.kind is ErrorKind.MARKET_UNVERIFIED
    )
    return min(effort, MAX_EFFORT_MINUTES)


def _media_score(
    media_results: Sequence[MediaValidationResult],
    *,
    require_media: bool,
) -> tuple[float, int]:
    passing = sum(1 for result in media_results if result.passed)
    checks = [check for result in media_results for check in result.checks]
    if checks:
        return sum(1 for check in checks if check.passed) / len(checks), passing
    if media_results:
        return passing / len(media_results), passing
    return (0.0 if require_media else 1.0), passing


def _recommendations(
    resolved: Mapping[str, FieldEvidence],
    components: Mapping[str, float],
    media_results: Sequence[MediaValidationResult],
    conflicts: Sequence[str],
) -> list[str]:
    recommendations: list[str] = []
    if FieldName.YIELD not in resolved:
        recommendations.append("Add page yield information if available")
    consumable_type = resolved.get(FieldName.CONSUMABLE_TYPE)
    if (
        FieldName.COLOR not in resolved
        and consumable_type is not None
        and consumable_type.value == ConsumableType.TONER_CARTRIDGE
    ):
        recommendations.append("Specify toner color (Black, Cyan, Magenta, Yellow)")
    if components[MEDIA_VALIDATION] < 0.8:
        if not media_results:
            recommendations.append("Add high-quality product image (800x800px minimum)")
        elif not any(result.passed for result in media_results):
            recommendations.append(
                "Improve image quality: white background, no watermarks, product only"
            )
    if components[MARKET_COMPLIANCE] < 0.8:
        recommendations.append("Verify device compatibility in additional regional sources")
        recommendations.append("Check official distributor websites")
    if components[SOURCE_RELIABILITY] < 0.7:
        recommendations.append("Add more reliable data sources")
        recommendations.append("Verify information from official manufacturer sources")
    if conflicts:
        recommendations.append(f"Review conflicting values for: {', '.join(conflicts)}")
    return recommendations
