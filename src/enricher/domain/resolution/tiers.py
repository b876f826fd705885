"""Trust policy: how much each source is believed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, assert_never

from enricher.domain.model import (
    CuratedRetailerSource,
    FallbackResearchSource,
    GenericAgentSource,
    LogisticsAuthoritySource,
    ManualOverrideSource,
    OfficialSource,
    SupplierTitleSource,
    TrustTier,
    normalize_domain,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from enricher.domain.model import ClaimSource

DEFAULT_OFFICIAL_DOMAINS: frozenset[str] = frozenset(
    {
        "hp.com",
        "support.hp.com",
        "canon.ru",
        "canon-europe.com",
        "usa.canon.com",
        "kyoceradocumentsolutions.ru",
        "kyoceradocumentsolutions.eu",
        "ricoh.ru",
        "brother.ru",
        "xerox.ru",
        "pantum.ru",
        "epson.ru",
        "kyocera.ru",
    }
)

DEFAULT_CURATED_DOMAINS: frozenset[str] = frozenset(
    {
        "nix.ru",
        "dns-shop.ru",
        "citilink.ru",
        "regard.ru",
        "komus.ru",
        "rashodnika.net",
        "cartridge.ru",
        "rm-company.ru",
        "onlinetrade.ru",
    }
)


def domain_in(domain: str, domains: Iterable[str]) -> bool:
    """True when ``domain`` equals or is a subdomain of one of ``domains``."""

    host = normalize_domain(domain)
    return any(host == known or host.endswith(f".{known}") for known in domains)


@dataclass(frozen=True, slots=True, kw_only=True)
class TrustPolicy:
    """Immutable trust configuration threaded into the resolver.

    ``consensus_boost`` is added per additional agreeing domain,
    ``conflict_penalty`` is subtracted from a conflicted field's confidence.
    """

    official_domains: frozenset[str] = DEFAULT_OFFICIAL_DOMAINS
    curated_domains: frozenset[str] = DEFAULT_CURATED_DOMAINS
    consensus_boost: float = 0.05
    conflict_penalty: float = 0.15

    def __post_init__(self) -> None:
        for name in ("consensus_boost", "conflict_penalty"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

    def tier_for(self, source: ClaimSource) -> TrustTier:
        match source:
            case ManualOverrideSource():
                return TrustTier.MANUAL
            case OfficialSource():
                return TrustTier.OFFICIAL
            case CuratedRetailerSource() | LogisticsAuthoritySource():
                return TrustTier.CURATED
            case SupplierTitleSource():
                return TrustTier.SUPPLIER
            case GenericAgentSource(domain=domain):
                if domain_in(domain, self.official_domains):
                    return TrustTier.OFFICIAL
                if domain_in(domain, self.curated_domains):
                    return TrustTier.CURATED
                return TrustTier.GENERIC
            case FallbackResearchSource():
                return TrustTier.GENERIC
            case _:
                assert_never(source)
