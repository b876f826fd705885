"""Corroboration-based market eligibility of referenced devices."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from enricher.domain.extraction import collapse_whitespace
from enricher.domain.model import (
    EligibilityBucket,
    EligibilityReport,
    EligibilityResult,
    FieldName,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from enricher.domain.model import Claim

    from .policy import MarketPolicy

log = getLogger(__name__)

COUNT_WEIGHT = 0.5
CONFIDENCE_WEIGHT = 0.3


def entity_key(name: str) -> str:
    return collapse_whitespace(name).casefold()


@dataclass(slots=True)
class _EntityEvidence:
    display_name: str
    claims: list[Claim] = field(default_factory=list["Claim"])


def classify_entity(
    entity: str,
    claims: Iterable[Claim],
    *,
    policy: MarketPolicy,
) -> EligibilityResult:
    """Bucket one entity by the number of distinct trusted sources behind it.

    Claims are counted per matched :class:`MarketSource`, so several hosts of
    one retailer (``nix.ru``, ``max.nix.ru``) corroborate only once.
    """

    claims = list(claims)
    trusted_sources: dict[str, None] = {}
    official = False
    for claim in claims:
        source = policy.source_for(claim.source_domain)
        if source is None:
            continue
        trusted_sources.setdefault(source.name, None)
        official = official or source.is_official

    count = len(trusted_sources)
    if count >= policy.min_trusted_sources:
        bucket = EligibilityBucket.VERIFIED
    elif count > 0:
        bucket = EligibilityBucket.UNKNOWN
    else:
        bucket = EligibilityBucket.REJECTED

    mean_confidence = sum(c.confidence for c in claims) / len(claims) if claims else 0.0
    score = (
        COUNT_WEIGHT * min(1.0, count / policy.min_trusted_sources)
        + CONFIDENCE_WEIGHT * mean_confidence
        + (policy.official_domain_bonus if official else 0.0)
    )
    score = max(0.0, min(1.0, score))
    return EligibilityResult(
        entity=entity,
        bucket=bucket,
        distinct_trusted_sources=count,
        score=score,
        sources=tuple(trusted_sources),
        official_source=official,
        meets_confidence_threshold=score >= policy.confidence_threshold,
    )


def classify_entities(claims: Iterable[Claim], *, policy: MarketPolicy) -> EligibilityReport:
    """Partition every referenced entity into verified, unknown or rejected.

    Only ``compatible_device`` claims are considered. Entities are keyed by
    their case- and whitespace-insensitive name and keep the order in which
    they first appear.
    """

    grouped: dict[str, _EntityEvidence] = {}
    for claim in claims:
        if claim.field != FieldName.COMPATIBLE_DEVICE or not claim.value.strip():
            continue
        key = entity_key(claim.value)
        evidence = grouped.setdefault(key, _EntityEvidence(display_name=claim.value.strip()))
        evidence.claims.append(claim)

    buckets: dict[EligibilityBucket, list[EligibilityResult]] = {
        bucket: [] for bucket in EligibilityBucket
    }
    for evidence in grouped.values():
        result = classify_entity(evidence.display_name, evidence.claims, policy=policy)
        buckets[result.bucket].append(result)

    report = EligibilityReport(
        verified=tuple(buckets[EligibilityBucket.VERIFIED]),
        unknown=tuple(buckets[EligibilityBucket.UNKNOWN]),
        rejected=tuple(buckets[EligibilityBucket.REJECTED]),
    )
    log.debug(
        "Eligibility under %s: %d verified, %d unknown, %d rejected",
        policy.name,
        len(report.verified),
        len(report.unknown),
        len(report.rejected),
    )
    return report
