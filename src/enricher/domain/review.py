"""Review surface: manual overrides and approval of finished items."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from enricher.domain.model import MULTI_VALUED_FIELDS, AuditAction, Claim, ManualOverrideSource
from enricher.domain.resolution import resolve_field

if TYPE_CHECKING:
    from enricher.domain.model import EnrichedItem, FieldEvidence
    from enricher.domain.resolution import TrustPolicy

log = getLogger(__name__)

MANUAL_CONFIDENCE = 1.0


def apply_manual_override(
    item: EnrichedItem,
    field: str,
    value: str,
    *,
    reviewer: str,
    policy: TrustPolicy,
    at: datetime | None = None,
) -> FieldEvidence | None:
    """Record a reviewer's value as a new manual-tier claim and re-resolve ``field``.

    The override is appended like any other claim; earlier claims stay in the
    ledger. Multi-valued fields only gain the claim and return ``None``.
    Raises :class:`FrozenItemError` once the item is approved.
    """

    if not value.strip():
        raise ValueError("Manual override value must not be empty")
    before = item.resolved_value(field)
    claim = Claim(
        field=field,
        value=value.strip(),
        source=ManualOverrideSource(reviewer=reviewer),
        confidence=MANUAL_CONFIDENCE,
        extraction_method="manual_override",
        extracted_at=at or datetime.now(tz=UTC),
    )
    item.record_claim(claim)
    item.audit(
        AuditAction.MANUAL_OVERRIDE,
        field=field,
        before=before,
        after=claim.value,
        source=reviewer,
    )
    if field in MULTI_VALUED_FIELDS:
        return None
    evidence = resolve_field(item.evidence_ledger.claims_for(field), policy=policy, field=field)
    if evidence is None:
        raise RuntimeError(f"Override of {field} left nothing to resolve")
    item.record_resolution(evidence)
    log.info("Manual override of %s on %s by %s", field, item.id, reviewer)
    return evidence


def approve(item: EnrichedItem, *, reviewer: str, at: datetime | None = None) -> EnrichedItem:
    """Freeze ``item``; every later mutation raises :class:`FrozenItemError`."""

    item.freeze(at=at)
    item.audit(AuditAction.APPROVED, before=item.status, after="approved", source=reviewer)
    return item
