"""Trust resolution of competing field claims."""

from __future__ import annotations

from .resolver import resolve_field, resolve_ledger
from .tiers import DEFAULT_CURATED_DOMAINS, DEFAULT_OFFICIAL_DOMAINS, TrustPolicy, domain_in
from .values import normalize_value, values_agree

__all__ = [
    "DEFAULT_CURATED_DOMAINS",
    "DEFAULT_OFFICIAL_DOMAINS",
    "TrustPolicy",
    "domain_in",
    "normalize_value",
    "resolve_field",
    "resolve_ledger",
    "values_agree",
]
