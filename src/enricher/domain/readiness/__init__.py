"""Publication readiness gate and bulk decisions."""

from __future__ import annotations

from .bulk import (
    BrandReadiness,
    BulkCriteria,
    BulkDecision,
    BulkRejection,
    BulkSummary,
    IssueFrequency,
    IssueSeverity,
    ReadinessReport,
    evaluate_bulk,
    readiness_report,
    rejection_reasons,
)
from .gate import (
    DEFAULT_TIER_WEIGHTS,
    ReadinessConfig,
    ReadinessWeights,
    confidence_level_for,
    estimate_manual_effort,
    evaluate_readiness,
)

__all__ = [
    "DEFAULT_TIER_WEIGHTS",
    "BrandReadiness",
    "BulkCriteria",
    "BulkDecision",
    "BulkRejection",
    "BulkSummary",
    "IssueFrequency",
    "IssueSeverity",
    "ReadinessConfig",
    "ReadinessReport",
    "ReadinessWeights",
    "confidence_level_for",
    "estimate_manual_effort",
    "evaluate_bulk",
    "evaluate_readiness",
    "readiness_report",
    "rejection_reasons",
]
