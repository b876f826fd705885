"""Claim primitives.

A claim is one assertion about one field of one item, made by one source.
Claims are immutable once recorded; competing claims for the same field are
reconciled later by the trust resolver, never by editing a claim in place.

Sources are modelled as a tagged variant keyed by ``source_type`` so that the
resolver can match on them exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from .enums import SourceType

SUPPLIER_DOMAIN = "supplier.input"
MANUAL_DOMAIN = "review.manual"


@dataclass(frozen=True, slots=True, kw_only=True)
class ManualOverrideSource:
    """A reviewer typed the value in; outranks every automated source."""

    reviewer: str
    domain: str = MANUAL_DOMAIN
    corroborated: bool = False
    source_type: Literal[SourceType.MANUAL_OVERRIDE] = SourceType.MANUAL_OVERRIDE


@dataclass(frozen=True, slots=True, kw_only=True)
class OfficialSource:
    """Manufacturer site or official regional distributor."""

    domain: str
    corroborated: bool = False
    source_type: Literal[SourceType.OFFICIAL] = SourceType.OFFICIAL


@dataclass(frozen=True, slots=True, kw_only=True)
class CuratedRetailerSource:
    """Spec-heavy regional retailer or compatibility database."""

    domain: str
    corroborated: bool = False
    source_type: Literal[SourceType.CURATED_RETAILER] = SourceType.CURATED_RETAILER


@dataclass(frozen=True, slots=True, kw_only=True)
class LogisticsAuthoritySource:
    """The exclusive regional logistics lookup (packaging, weight, dimensions)."""

    domain: str
    corroborated: bool = False
    source_type: Literal[SourceType.LOGISTICS_AUTHORITY] = SourceType.LOGISTICS_AUTHORITY


@dataclass(frozen=True, slots=True, kw_only=True)
class SupplierTitleSource:
    """Values parsed out of the supplier's own product title."""

    domain: str = SUPPLIER_DOMAIN
    corroborated: bool = False
    source_type: Literal[SourceType.SUPPLIER_TITLE] = SourceType.SUPPLIER_TITLE


@dataclass(frozen=True, slots=True, kw_only=True)
class GenericAgentSource:
    """Open web page or research-agent extraction."""

    domain: str
    corroborated: bool = False
    source_type: Literal[SourceType.GENERIC_AGENT] = SourceType.GENERIC_AGENT


@dataclass(frozen=True, slots=True, kw_only=True)
class FallbackResearchSource:
    """Broad research used after the authoritative lookup came back empty."""

    domain: str
    corroborated: bool = False
    source_type: Literal[SourceType.FALLBACK_RESEARCH] = SourceType.FALLBACK_RESEARCH


type ClaimSource = (
    ManualOverrideSource
    | OfficialSource
    | CuratedRetailerSource
    | LogisticsAuthoritySource
    | SupplierTitleSource
    | GenericAgentSource
    | FallbackResearchSource
)


def build_source(
    source_type: SourceType | str,
    domain: str,
    *,
    corroborated: bool = False,
) -> ClaimSource:
    """Build the source variant for a wire-level ``source_type`` tag."""

    kind = SourceType(source_type)
    domain = normalize_domain(domain)
    match kind:
        case SourceType.MANUAL_OVERRIDE:
            return ManualOverrideSource(reviewer=domain or "unknown")
        case SourceType.OFFICIAL:
            return OfficialSource(domain=domain, corroborated=corroborated)
        case SourceType.CURATED_RETAILER:
            return CuratedRetailerSource(domain=domain, corroborated=corroborated)
        case SourceType.LOGISTICS_AUTHORITY:
            return LogisticsAuthoritySource(domain=domain, corroborated=corroborated)
        case SourceType.SUPPLIER_TITLE:
            return SupplierTitleSource(corroborated=corroborated)
        case SourceType.GENERIC_AGENT:
            return GenericAgentSource(domain=domain, corroborated=corroborated)
        case SourceType.FALLBACK_RESEARCH:
            return FallbackResearchSource(domain=domain, corroborated=corroborated)


def normalize_domain(domain: str) -> str:
    value = domain.strip().lower()
    for prefix in ("https://", "http://"):
        if value.startswith(prefix):
            value = value[len(prefix) :]
    value = value.split("/", 1)[0]
    if value.startswith("www."):
        value = value[4:]
    return value


@dataclass(frozen=True, slots=True, kw_only=True)
class Claim:
    """One observed value for one field.

    ``claim_id`` and ``extracted_at`` do not take part in equality, so
    re-extracting the same text yields claims that compare equal.
    """

    field: str
    value: str
    source: ClaimSource
    confidence: float
    extraction_method: str
    extracted_at: datetime = field(
        default_factory=lambda: datetime.now(tz=UTC), compare=False
    )
    claim_id: UUID = field(default_factory=uuid4, compare=False)

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Claim confidence must be within [0, 1], got {self.confidence}")
        if not self.field:
            raise ValueError("Claim field must not be empty")

    @property
    def source_type(self) -> SourceType:
        return self.source.source_type

    @property
    def source_domain(self) -> str:
        return self.source.domain

    def retagged(self, source: ClaimSource) -> Claim:
        """Return a fresh claim carrying the same observation under ``source``."""

        return replace(self, source=source, claim_id=uuid4())
