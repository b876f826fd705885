"""Per-field trust resolution.

Rules, applied to every claim recorded for one field:

- each claim gets a tier from :meth:`TrustPolicy.tier_for`
- only claims at the highest tier present compete; tier strictly dominates
  confidence
- a lone top-tier claim resolves as ``one_source``; among manual overrides
  only the latest counts
- agreeing top-tier claims resolve as ``consensus`` with a boosted confidence
- disagreeing top-tier claims resolve provisionally to the most confident one
  and are flagged as a conflict for review
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from enricher.domain.model import MULTI_VALUED_FIELDS, FieldEvidence, ResolutionMethod, TrustTier

from .values import normalize_value

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from enricher.domain.model import Claim, EvidenceLedger

    from .tiers import TrustPolicy

log = getLogger(__name__)


def resolve_field(
    claims: Iterable[Claim],
    *,
    policy: TrustPolicy,
    field: str,
) -> FieldEvidence | None:
    """Resolve the competing ``claims`` for ``field``; ``None`` when there are none."""

    candidates = [claim for claim in claims if claim.field == field and claim.value.strip()]
    if not candidates:
        return None

    tiers = [policy.tier_for(claim.source) for claim in candidates]
    top_tier = max(tiers)
    winners = [claim for claim, tier in zip(candidates, tiers, strict=True) if tier == top_tier]
    if top_tier is TrustTier.MANUAL:
        # The latest reviewer decision replaces earlier overrides.
        winners = [max(winners, key=lambda claim: claim.extracted_at)]

    if len(winners) == 1:
        winner = winners[0]
        return FieldEvidence(
            field=field,
            value=winner.value,
            method=ResolutionMethod.ONE_SOURCE,
            confidence=winner.confidence,
            tier=top_tier,
            contributing_claims=(winner,),
        )

    best = _most_confident(winners)
    keys = {normalize_value(field, claim.value) for claim in winners}
    if len(keys) == 1:
        domains = {claim.source_domain for claim in winners}
        confidence = min(1.0, best.confidence + policy.consensus_boost * (len(domains) - 1))
        return FieldEvidence(
            field=field,
            value=best.value,
            method=ResolutionMethod.CONSENSUS,
            confidence=confidence,
            tier=top_tier,
            contributing_claims=tuple(winners),
        )

    log.info(
        "Conflict on %s at tier %s: %s",
        field,
        top_tier.name,
        sorted(keys),
    )
    return FieldEvidence(
        field=field,
        value=best.value,
        method=ResolutionMethod.CONFLICT_OVERRIDE,
        confidence=max(0.0, best.confidence - policy.conflict_penalty),
        tier=top_tier,
        is_conflict=True,
        contributing_claims=tuple(winners),
    )


def resolve_ledger(
    ledger: EvidenceLedger,
    *,
    policy: TrustPolicy,
    fields: Sequence[str] | None = None,
    record: Callable[[FieldEvidence], object] | None = None,
) -> dict[str, FieldEvidence]:
    """Resolve every single-valued field in ``ledger`` and record the results.

    ``record`` defaults to ``ledger.record_resolution``; the coordinator
    passes the item's recorder so that each resolution is audited.
    """

    writer = record or ledger.record_resolution
    resolved: dict[str, FieldEvidence] = {}
    for name in fields if fields is not None else ledger.resolvable_fields():
        if name in MULTI_VALUED_FIELDS:
            continue
        evidence = resolve_field(ledger.claims_for(name), policy=policy, field=name)
        if evidence is None:
            continue
        writer(evidence)
        resolved[name] = evidence
    return resolved


def _most_confident(claims: Sequence[Claim]) -> Claim:
    # Ties: corroborated sources first, then the earliest extraction.
    return min(
        claims,
        key=lambda claim: (-claim.confidence, not claim.source.corroborated, claim.extracted_at),
    )
