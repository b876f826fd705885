"""Market eligibility policies and their validation.

A policy names the regional sources whose listing of a device counts as
corroboration. Profiles differ only in their numbers, never in code path.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

from enricher.domain.model import normalize_domain

MIN_SOURCES_RANGE = (1, 5)
PRIORITY_RANGE = (1, 5)
HIGH_PRIORITY = 2
REQUIRED_HIGH_PRIORITY_SOURCES = 2


class PolicyValidationError(ValueError):
    """Raised when a market policy fails validation."""

    def __init__(self, policy: str, errors: list[str]) -> None:
        self.policy = policy
        self.errors = errors
        super().__init__(f"Invalid market policy {policy!r}: {'; '.join(errors)}")


@dataclass(frozen=True, slots=True, kw_only=True)
class MarketSource:
    name: str
    base_url: str
    priority: int
    is_official: bool = False
    search_patterns: tuple[str, ...] = ()

    def matches(self, domain: str) -> bool:
        """True when a claim from ``domain`` was published by this source."""

        host = normalize_domain(domain)
        for pattern in self.search_patterns:
            known = normalize_domain(pattern)
            if host == known or host.endswith(f".{known}"):
                return True
        return False


@dataclass(frozen=True, slots=True, kw_only=True)
class MarketPolicy:
    name: str
    min_trusted_sources: int
    sources: tuple[MarketSource, ...]
    official_domain_bonus: float
    confidence_threshold: float

    def source_for(self, domain: str) -> MarketSource | None:
        for source in self.sources:
            if source.matches(domain):
                return source
        return None


class PolicyProfile(StrEnum):
    STRICT = "strict"
    STANDARD = "standard"
    LENIENT = "lenient"
    ULTRA_STRICT = "ultra_strict"


def _source(
    name: str,
    base_url: str,
    priority: int,
    *patterns: str,
    official: bool = False,
) -> MarketSource:
    return MarketSource(
        name=name,
        base_url=base_url,
        priority=priority,
        is_official=official,
        search_patterns=patterns,
    )


DEFAULT_MARKET_SOURCES: tuple[MarketSource, ...] = (
    _source("cartridge.ru", "https://cartridge.ru", 1, "cartridge.ru", "картридж.ру"),
    _source("rashodnika.net", "https://rashodnika.net", 1, "rashodnika.net", "расходника.нет"),
    _source(
        "nix.ru", "https://nix.ru", 2, "nix.ru", "никс.ру", "max.nix.ru", "elets.nix.ru"
    ),
    _source("onlinetrade.ru", "https://onlinetrade.ru", 1, "onlinetrade.ru", "онлайнтрейд.ру"),
    _source("citilink.ru", "https://www.citilink.ru", 1, "citilink.ru", "ситилинк.ру"),
    _source("dns-shop.ru", "https://www.dns-shop.ru", 1, "dns-shop.ru", "днс-шоп.ру"),
    _source(
        "hp.com/ru",
        "https://www.hp.com/ru-ru",
        3,
        "hp.com/ru",
        "support.hp.com/ru",
        official=True,
    ),
    _source("canon.ru", "https://www.canon.ru", 3, "canon.ru", "support.canon.ru", official=True),
    _source("epson.ru", "https://www.epson.ru", 3, "epson.ru", "support.epson.ru", official=True),
    _source(
        "brother.ru", "https://www.brother.ru", 3, "brother.ru", "support.brother.ru", official=True
    ),
    _source(
        "kyocera.ru", "https://www.kyocera.ru", 3, "kyocera.ru", "support.kyocera.ru", official=True
    ),
)

_STANDARD = MarketPolicy(
    name=PolicyProfile.STANDARD,
    min_trusted_sources=2,
    sources=DEFAULT_MARKET_SOURCES,
    official_domain_bonus=0.2,
    confidence_threshold=0.7,
)

PROFILES: dict[PolicyProfile, MarketPolicy] = {
    PolicyProfile.STRICT: replace(
        _STANDARD,
        name=PolicyProfile.STRICT,
        official_domain_bonus=0.3,
        confidence_threshold=0.8,
    ),
    PolicyProfile.STANDARD: _STANDARD,
    PolicyProfile.LENIENT: replace(
        _STANDARD,
        name=PolicyProfile.LENIENT,
        min_trusted_sources=1,
        official_domain_bonus=0.1,
        confidence_threshold=0.6,
    ),
    PolicyProfile.ULTRA_STRICT: replace(
        _STANDARD,
        name=PolicyProfile.ULTRA_STRICT,
        min_trusted_sources=3,
        sources=tuple(s for s in DEFAULT_MARKET_SOURCES if s.priority >= HIGH_PRIORITY),
        official_domain_bonus=0.4,
        confidence_threshold=0.9,
    ),
}

_USE_CASES: dict[str, PolicyProfile] = {
    "production": PolicyProfile.STANDARD,
    "development": PolicyProfile.LENIENT,
    "testing": PolicyProfile.LENIENT,
    "critical": PolicyProfile.ULTRA_STRICT,
}


def get_policy(profile: PolicyProfile | str = PolicyProfile.STANDARD) -> MarketPolicy:
    key = str(profile).strip().lower().replace("-", "_")
    try:
        return PROFILES[PolicyProfile(key)]
    except ValueError:
        raise PolicyValidationError(str(profile), ["unknown policy profile"]) from None


def recommended_policy(use_case: str) -> MarketPolicy:
    return PROFILES[_USE_CASES.get(use_case.strip().lower(), PolicyProfile.STANDARD)]


def custom_policy(
    *,
    name: str = "custom",
    min_trusted_sources: int = 2,
    additional_sources: tuple[MarketSource, ...] = (),
    official_domain_bonus: float = 0.2,
    confidence_threshold: float = 0.7,
) -> MarketPolicy:
    """Default sources plus ``additional_sources``, validated."""

    policy = MarketPolicy(
        name=name,
        min_trusted_sources=min_trusted_sources,
        sources=(*DEFAULT_MARKET_SOURCES, *additional_sources),
        official_domain_bonus=official_domain_bonus,
        confidence_threshold=confidence_threshold,
    )
    return ensure_valid_policy(policy)


def validate_policy(policy: MarketPolicy) -> list[str]:
    errors: list[str] = []
    low, high = MIN_SOURCES_RANGE
    if not low <= policy.min_trusted_sources <= high:
        errors.append(f"min_trusted_sources must be between {low} and {high}")
    if not policy.sources:
        errors.append("sources must not be empty")

    for index, source in enumerate(policy.sources):
        label = source.name or f"#{index}"
        if not source.name.strip():
            errors.append(f"source at index {index} must have a name")
        if not source.base_url.startswith(("http://", "https://")):
            errors.append(f"source {label!r} must have an http(s) base_url")
        if not source.search_patterns:
            errors.append(f"source {label!r} must have at least one search pattern")
        if not PRIORITY_RANGE[0] <= source.priority <= PRIORITY_RANGE[1]:
            errors.append(f"source {label!r} priority must be between 1 and 5")

    if not 0.0 <= policy.official_domain_bonus <= 1.0:
        errors.append("official_domain_bonus must be between 0 and 1")
    if not 0.0 <= policy.confidence_threshold <= 1.0:
        errors.append("confidence_threshold must be between 0 and 1")

    high_priority = [s for s in policy.sources if s.priority >= HIGH_PRIORITY]
    if len(high_priority) < REQUIRED_HIGH_PRIORITY_SOURCES:
        errors.append(
            f"at least {REQUIRED_HIGH_PRIORITY_SOURCES} sources need priority >= {HIGH_PRIORITY}"
        )
    if policy.official_domain_bonus > 0 and not any(s.is_official for s in policy.sources):
        errors.append("official_domain_bonus > 0 requires at least one official source")
    return errors


def ensure_valid_policy(policy: MarketPolicy) -> MarketPolicy:
    errors = validate_policy(policy)
    if errors:
        raise PolicyValidationError(policy.name, errors)
    return policy
