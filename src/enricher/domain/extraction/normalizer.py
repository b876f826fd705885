"""Extraction entry point: raw supplier title to candidate claims."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger

from enricher.domain.model import (
    Claim,
    ErrorKind,
    FieldName,
    PipelineIssue,
    SupplierTitleSource,
)

from .attributes import detect_color, detect_type, extract_device_candidates
from .brands import BrandDetection, detect_brand
from .canonical import NormalizationStep, canonicalize_title
from .model_patterns import ModelExtraction, extract_model
from .yields import YieldExtraction, standardize_yields

log = getLogger(__name__)

DEVICE_CLAIM_CONFIDENCE = 0.6


@dataclass(frozen=True, slots=True, kw_only=True)
class ExtractionResult:
    raw_title: str
    canonical_title: str
    claims: tuple[Claim, ...]
    model: ModelExtraction
    brand: BrandDetection
    yields: tuple[YieldExtraction, ...] = ()
    device_candidates: tuple[str, ...] = ()
    normalization_log: tuple[NormalizationStep, ...] = ()
    issues: tuple[PipelineIssue, ...] = ()

    def claim_for(self, field_name: str) -> Claim | None:
        for claim in self.claims:
            if claim.field == field_name:
                return claim
        return None


def extract_claims(raw_title: str, *, extracted_at: datetime | None = None) -> ExtractionResult:
    """Turn ``raw_title`` into supplier-tier claims.

    Pure: the same title always yields claims that compare equal. Fields
    with no match produce no claim at all.
    """

    timestamp = extracted_at or datetime.now(tz=UTC)
    canonical, steps = canonicalize_title(raw_title)
    converted, yields = standardize_yields(canonical)
    model = extract_model(converted)
    brand = detect_brand(converted, model.model or None)
    consumable_type = detect_type(converted)
    color = detect_color(converted)
    devices = extract_device_candidates(converted)

    source = SupplierTitleSource()
    claims: list[Claim] = []

    def add(field_name: str, value: str, confidence: float, method: str) -> None:
        if not value:
            return
        claims.append(
            Claim(
                field=field_name,
                value=value,
                source=source,
                confidence=confidence,
                extraction_method=method,
                extracted_at=timestamp,
            )
        )

    add(FieldName.BRAND, brand.brand, brand.confidence, brand.method)
    add(FieldName.MODEL, model.model, model.confidence, model.method)
    add(
        FieldName.CONSUMABLE_TYPE,
        consumable_type.value,
        consumable_type.confidence,
        consumable_type.method,
    )
    add(FieldName.COLOR, color.value, color.confidence, color.method)
    if yields:
        best_yield = max(yields, key=lambda extraction: extraction.confidence)
        add(FieldName.YIELD, best_yield.render(), best_yield.confidence, "yield_notation")
    for device in devices:
        add(FieldName.COMPATIBLE_DEVICE, device, DEVICE_CLAIM_CONFIDENCE, "title_device_block")

    issues: list[PipelineIssue] = []
    if model.ambiguous:
        top = model.candidates[0].priority
        rivals = sorted({c.model for c in model.candidates if c.priority == top})
        issues.append(
            PipelineIssue(
                kind=ErrorKind.EXTRACTION_AMBIGUOUS,
                message=f"Several model candidates of equal priority: {', '.join(rivals)}",
                field=FieldName.MODEL,
            )
        )

    log.debug(
        "Extracted %d claims from %r (model=%r, brand=%r)",
        len(claims),
        canonical,
        model.model,
        brand.brand,
    )
    return ExtractionResult(
        raw_title=raw_title,
        canonical_title=converted,
        claims=tuple(claims),
        model=model,
        brand=brand,
        yields=yields,
        device_candidates=devices,
        normalization_log=steps,
        issues=tuple(issues),
    )
