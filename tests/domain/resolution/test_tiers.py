from __future__ import annotations

import pytest

from enricher.domain.model import (
    CuratedRetailerSource,
    FallbackResearchSource,
    GenericAgentSource,
    LogisticsAuthoritySource,
    ManualOverrideSource,
    OfficialSource,
    SupplierTitleSource,
    TrustTier,
    build_source,
)
from enricher.domain.resolution import TrustPolicy, domain_in, normalize_value, values_agree

POLICY = TrustPolicy()


@pytest.mark.parametrize(
    ("source", "tier"),
    [
        (ManualOverrideSource(reviewer="alice"), TrustTier.MANUAL),
        (OfficialSource(domain="hp.com"), TrustTier.OFFICIAL),
        (CuratedRetailerSource(domain="unknown-shop.example"), TrustTier.CURATED),
        (LogisticsAuthoritySource(domain="logistics.example"), TrustTier.CURATED),
        (SupplierTitleSource(), TrustTier.SUPPLIER),
        (GenericAgentSource(domain="random-spam-blog.com"), TrustTier.GENERIC),
        (GenericAgentSource(domain="support.hp.com"), TrustTier.OFFICIAL),
        (GenericAgentSource(domain="max.nix.ru"), TrustTier.CURATED),
        (FallbackResearchSource(domain="hp.com"), TrustTier.GENERIC),
    ],
)
def test_tier_for(source: object, tier: TrustTier) -> None:
    assert POLICY.tier_for(source) is tier  # type: ignore[arg-type]


def test_tier_ordering() -> None:
    assert (
        TrustTier.GENERIC
        < TrustTier.SUPPLIER
        < TrustTier.CURATED
        < TrustTier.OFFICIAL
        < TrustTier.MANUAL
    )


def test_custom_policy_domains() -> None:
    policy = TrustPolicy(official_domains=frozenset({"vendor.example"}))

    assert policy.tier_for(GenericAgentSource(domain="vendor.example")) is TrustTier.OFFICIAL
    assert policy.tier_for(GenericAgentSource(domain="hp.com")) is TrustTier.GENERIC


def test_policy_rejects_out_of_range_values() -> None:
    with pytest.raises(ValueError, match="consensus_boost"):
        TrustPolicy(consensus_boost=1.5)


def test_domain_in_matches_subdomains_only() -> None:
    assert domain_in("https://www.nix.ru/price", {"nix.ru"})
    assert domain_in("elets.nix.ru", {"nix.ru"})
    assert not domain_in("phoenix.ru", {"nix.ru"})


def test_build_source_normalizes_domain() -> None:
    source = build_source("curated_retailer", "https://www.Cartridge.ru/item/1")

    assert source == CuratedRetailerSource(domain="cartridge.ru")


@pytest.mark.parametrize(
    ("field", "left", "right", "agree"),
    [
        ("yield", "9200 pages", "9.2K", True),
        ("yield", "9200 pages", "9200 copies", False),
        ("model", "CF-234A", "cf234a", True),
        ("brand", "HP ", "hp", True),
        ("color", "Black", "Cyan", False),
    ],
)
def test_values_agree(field: str, left: str, right: str, agree: bool) -> None:
    assert values_agree(field, left, right) is agree


def test_normalize_value_for_yield() -> None:
    assert normalize_value("yield", "15K") == "15000 pages"
