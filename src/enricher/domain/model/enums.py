"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class FieldName(StrEnum):
    BRAND = "brand"
    MODEL = "model"
    CONSUMABLE_TYPE = "type"
    COLOR = "color"
    YIELD = "yield"
    PACKAGING = "packaging"
    COMPATIBLE_DEVICE = "compatible_device"
    IMAGE_URL = "image_url"


# Fields that may legitimately carry many values; never resolved to one winner.
MULTI_VALUED_FIELDS: frozenset[str] = frozenset(
    {FieldName.COMPATIBLE_DEVICE, FieldName.IMAGE_URL}
)


class SourceType(StrEnum):
    MANUAL_OVERRIDE = "manual_override"
    OFFICIAL = "official"
    CURATED_RETAILER = "curated_retailer"
    LOGISTICS_AUTHORITY = "logistics_authority"
    SUPPLIER_TITLE = "supplier_title"
    GENERIC_AGENT = "generic_agent"
    FALLBACK_RESEARCH = "fallback_research"


class TrustTier(IntEnum):
    """Inherent reliability of a source. Higher always wins."""

    GENERIC = 1
    SUPPLIER = 2
    CURATED = 3
    OFFICIAL = 4
    MANUAL = 5


class ResolutionMethod(StrEnum):
    ONE_SOURCE = "one_source"
    CONSENSUS = "consensus"
    CONFLICT_OVERRIDE = "conflict_override"


class EligibilityBucket(StrEnum):
    VERIFIED = "verified"
    UNKNOWN = "unknown"
    REJECTED = "rejected"


class ConfidenceLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK = {
    ConfidenceLevel.LOW: 0,
    ConfidenceLevel.MEDIUM: 1,
    ConfidenceLevel.HIGH: 2,
}


class ItemStatus(StrEnum):
    OK = "ok"
    NEEDS_REVIEW = "needs_review"
    FAILED = "failed"


class PipelineStage(StrEnum):
    RECEIVED = "received"
    NORMALIZING = "normalizing"
    RESEARCHING = "researching"
    RESOLVING = "resolving"
    CLASSIFYING = "classifying"
    GATING = "gating"
    OK = "ok"
    NEEDS_REVIEW = "needs_review"
    FAILED = "failed"


class AuditAction(StrEnum):
    STAGE_TRANSITION = "stage_transition"
    CLAIM_RECORDED = "claim_recorded"
    FIELD_RESOLVED = "field_resolved"
    ELIGIBILITY_CLASSIFIED = "eligibility_classified"
    MEDIA_VALIDATED = "media_validated"
    READINESS_EVALUATED = "readiness_evaluated"
    COLLABORATOR_FAILED = "collaborator_failed"
    FALLBACK_USED = "fallback_used"
    MANUAL_OVERRIDE = "manual_override"
    APPROVED = "approved"


class ErrorKind(StrEnum):
    EXTRACTION_AMBIGUOUS = "extraction_ambiguous"
    MISSING_MANDATORY_FIELD = "missing_mandatory_field"
    SOURCE_CONFLICT = "source_conflict"
    MARKET_UNVERIFIED = "market_unverified"
    COLLABORATOR_UNAVAILABLE = "collaborator_unavailable"
    MALFORMED_RESPONSE = "malformed_response"
    MEDIA_UNVERIFIED = "media_unverified"
    PIPELINE_ERROR = "pipeline_error"
    PERSISTENCE_FAILED = "persistence_failed"


class YieldUnit(StrEnum):
    PAGES = "pages"
    COPIES = "copies"
    ML = "ml"


class ConsumableType(StrEnum):
    TONER_CARTRIDGE = "toner_cartridge"
    DRUM_UNIT = "drum_unit"
    INK_CARTRIDGE = "ink_cartridge"
    WASTE_TONER = "waste_toner"
