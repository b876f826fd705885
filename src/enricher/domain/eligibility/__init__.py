"""Market eligibility filter."""

from __future__ import annotations

from .classifier import classify_entities, classify_entity, entity_key
from .policy import (
    DEFAULT_MARKET_SOURCES,
    PROFILES,
    MarketPolicy,
    MarketSource,
    PolicyProfile,
    PolicyValidationError,
    custom_policy,
    ensure_valid_policy,
    get_policy,
    recommended_policy,
    validate_policy,
)

__all__ = [
    "DEFAULT_MARKET_SOURCES",
    "PROFILES",
    "MarketPolicy",
    "MarketSource",
    "PolicyProfile",
    "PolicyValidationError",
    "classify_entities",
    "classify_entity",
    "custom_policy",
    "ensure_valid_policy",
    "entity_key",
    "get_policy",
    "recommended_policy",
    "validate_policy",
]
