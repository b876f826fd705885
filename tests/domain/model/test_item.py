from __future__ import annotations

from datetime import UTC, datetime

import pytest

from enricher.domain.model import (
    AuditAction,
    EnrichedItem,
    ErrorKind,
    FieldEvidence,
    FrozenItemError,
    GenericAgentSource,
    ItemStatus,
    PipelineIssue,
    PipelineStage,
    ResolutionMethod,
    SourceType,
    TrustTier,
    build_source,
    item_id_for,
)
from tests.support.claims import make_claim

APPROVED_AT = datetime(2025, 3, 2, 9, 30, tzinfo=UTC)


def _item() -> EnrichedItem:
    return EnrichedItem(input_raw="HP CF234A", input_hash="abc123")


def _brand(value: str = "HP") -> FieldEvidence:
    return FieldEvidence(
        field="brand",
        value=value,
        method=ResolutionMethod.ONE_SOURCE,
        confidence=0.95,
        tier=TrustTier.SUPPLIER,
    )


def test_identity_is_derived_from_input_hash() -> None:
    assert _item().id == item_id_for("abc123")
    assert _item().id != item_id_for("abc124")


def test_mutations_are_audited() -> None:
    item = _item()
    claim = make_claim("brand", "HP", source_type=SourceType.SUPPLIER_TITLE)

    item.transition(PipelineStage.NORMALIZING)
    item.record_claim(claim)
    item.record_resolution(_brand())
    item.record_resolution(_brand())

    actions = [entry.action for entry in item.audit_trail]
    assert actions == [
        AuditAction.STAGE_TRANSITION,
        AuditAction.CLAIM_RECORDED,
        AuditAction.FIELD_RESOLVED,
    ]
    transition, recorded, resolved = item.audit_trail
    assert (transition.before, transition.after) == ("received", "normalizing")
    assert recorded.source == "supplier_title:supplier.input"
    assert (resolved.before, resolved.after) == (None, "HP")
    assert item.resolved_value("brand") == "HP"
    assert item.resolved_value("model") is None


def test_issues_are_deduplicated() -> None:
    item = _item()
    issue = PipelineIssue(kind=ErrorKind.PIPELINE_ERROR, message="boom")

    item.add_issue(issue)
    item.add_issue(PipelineIssue(kind=ErrorKind.PIPELINE_ERROR, message="boom"))

    assert item.issues == [issue]


def test_frozen_item_rejects_mutation() -> None:
    item = _item()
    item.freeze(at=APPROVED_AT)

    assert item.is_frozen
    with pytest.raises(FrozenItemError):
        item.record_claim(make_claim("brand", "HP"))
    with pytest.raises(FrozenItemError):
        item.record_resolution(_brand())
    with pytest.raises(FrozenItemError):
        item.transition(PipelineStage.GATING)
    with pytest.raises(FrozenItemError):
        item.freeze()


def test_to_record_shape() -> None:
    item = _item()
    item.status = ItemStatus.OK
    item.record_claim(make_claim("brand", "HP"))
    item.record_resolution(_brand())
    item.freeze(at=APPROVED_AT)

    record = item.to_record()

    assert set(record) == {
        "id",
        "input_raw",
        "input_hash",
        "status",
        "resolved_fields",
        "evidence_ledger",
        "claims",
        "eligibility_results",
        "media_results",
        "readiness",
        "audit_trail",
        "issues",
        "approved_at",
    }
    assert record["status"] == "ok"
    assert record["resolved_fields"] == {"brand": "HP"}
    assert record["evidence_ledger"]["brand"]["tier"] == "supplier"  # type: ignore[index]
    assert record["readiness"] is None
    assert record["approved_at"] == APPROVED_AT.isoformat()


def test_build_source_normalizes_domain() -> None:
    source = build_source("generic_agent", "https://www.Example.com/page")

    assert source == GenericAgentSource(domain="example.com")
