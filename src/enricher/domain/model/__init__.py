"""Domain model for consumable enrichment."""

from __future__ import annotations

from .claims import (
    MANUAL_DOMAIN,
    SUPPLIER_DOMAIN,
    Claim,
    ClaimSource,
    CuratedRetailerSource,
    FallbackResearchSource,
    GenericAgentSource,
    LogisticsAuthoritySource,
    ManualOverrideSource,
    OfficialSource,
    SupplierTitleSource,
    build_source,
    normalize_domain,
)
from .enums import (
    MULTI_VALUED_FIELDS,
    AuditAction,
    ConfidenceLevel,
    ConsumableType,
    EligibilityBucket,
    ErrorKind,
    FieldName,
    ItemStatus,
    PipelineStage,
    ResolutionMethod,
    SourceType,
    TrustTier,
    YieldUnit,
)
from .evidence import EvidenceLedger, FieldEvidence, TrustRegressionError
from .item import AuditTrailEntry, EnrichedItem, FrozenItemError, item_id_for
from .results import (
    EligibilityReport,
    EligibilityResult,
    MediaCheck,
    MediaValidationResult,
    PipelineIssue,
    ReadinessResult,
)

__all__ = [
    "MANUAL_DOMAIN",
    "MULTI_VALUED_FIELDS",
    "SUPPLIER_DOMAIN",
    "AuditAction",
    "AuditTrailEntry",
    "Claim",
    "ClaimSource",
    "ConfidenceLevel",
    "ConsumableType",
    "CuratedRetailerSource",
    "EligibilityBucket",
    "EligibilityReport",
    "EligibilityResult",
    "EnrichedItem",
    "ErrorKind",
    "EvidenceLedger",
    "FallbackResearchSource",
    "FieldEvidence",
    "FieldName",
    "FrozenItemError",
    "GenericAgentSource",
    "ItemStatus",
    "LogisticsAuthoritySource",
    "ManualOverrideSource",
    "MediaCheck",
    "MediaValidationResult",
    "OfficialSource",
    "PipelineIssue",
    "PipelineStage",
    "ReadinessResult",
    "ResolutionMethod",
    "SourceType",
    "SupplierTitleSource",
    "TrustRegressionError",
    "TrustTier",
    "YieldUnit",
    "build_source",
    "item_id_for",
    "normalize_domain",
]
