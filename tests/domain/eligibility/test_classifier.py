from __future__ import annotations

import pytest

from enricher.domain.eligibility import classify_entities, classify_entity, get_policy
from enricher.domain.model import EligibilityBucket, SourceType
from tests.support.claims import device_claim, make_claim

STANDARD = get_policy("standard")
DEVICE = "HP LaserJet Pro M106w"


def test_two_trusted_domains_verify_a_device() -> None:
    claims = [
        device_claim(DEVICE, "cartridge.ru", confidence=0.9),
        device_claim(DEVICE, "nix.ru", confidence=0.85),
    ]

    result = classify_entity(DEVICE, claims, policy=STANDARD)

    assert result.bucket is EligibilityBucket.VERIFIED
    assert result.distinct_trusted_sources == 2
    assert set(result.sources) == {"cartridge.ru", "nix.ru"}
    assert not result.official_source
    assert result.score == pytest.approx(0.5 + 0.3 * 0.875)
    assert result.meets_confidence_threshold


def test_single_trusted_domain_is_unknown() -> None:
    result = classify_entity(DEVICE, [device_claim(DEVICE, "nix.ru")], policy=STANDARD)

    assert result.bucket is EligibilityBucket.UNKNOWN
    assert result.distinct_trusted_sources == 1
    assert result.score == pytest.approx(0.25 + 0.27)
    assert not result.meets_confidence_threshold


def test_untrusted_domains_are_rejected() -> None:
    claims = [
        device_claim(DEVICE, "random-spam-blog.com", source_type=SourceType.GENERIC_AGENT),
        device_claim(DEVICE, "amazon.com", source_type=SourceType.GENERIC_AGENT),
    ]

    result = classify_entity(DEVICE, claims, policy=STANDARD)

    assert result.bucket is EligibilityBucket.REJECTED
    assert result.distinct_trusted_sources == 0
    assert result.sources == ()


def test_repeated_domain_counts_once() -> None:
    claims = [
        device_claim(DEVICE, "nix.ru", confidence=0.9),
        device_claim(DEVICE, "https://www.nix.ru/catalog", confidence=0.8),
    ]

    result = classify_entity(DEVICE, claims, policy=STANDARD)

    assert result.bucket is EligibilityBucket.UNKNOWN
    assert result.distinct_trusted_sources == 1


@pytest.mark.parametrize(
    ("first", "second"),
    [
        ("nix.ru", "max.nix.ru"),
        ("elets.nix.ru", "https://www.nix.ru/price"),
    ],
)
def test_hosts_of_one_source_count_once(first: str, second: str) -> None:
    claims = [device_claim(DEVICE, first), device_claim(DEVICE, second)]

    result = classify_entity(DEVICE, claims, policy=STANDARD)

    assert result.bucket is EligibilityBucket.UNKNOWN
    assert result.distinct_trusted_sources == 1
    assert result.sources == ("nix.ru",)


def test_official_site_subdomains_do_not_verify_alone() -> None:
    claims = [
        device_claim(DEVICE, "hp.com", source_type=SourceType.OFFICIAL),
        device_claim(DEVICE, "support.hp.com", source_type=SourceType.OFFICIAL),
    ]

    result = classify_entity(DEVICE, claims, policy=STANDARD)

    assert result.bucket is EligibilityBucket.UNKNOWN
    assert result.sources == ("hp.com/ru",)
    assert result.official_source


def test_official_source_adds_bonus() -> None:
    claims = [
        device_claim(DEVICE, "support.hp.com", source_type=SourceType.OFFICIAL),
        device_claim(DEVICE, "nix.ru"),
    ]

    result = classify_entity(DEVICE, claims, policy=STANDARD)

    assert result.bucket is EligibilityBucket.VERIFIED
    assert result.official_source
    assert result.score == pytest.approx(0.5 + 0.27 + 0.2)


def test_lenient_policy_verifies_with_one_source() -> None:
    result = classify_entity(DEVICE, [device_claim(DEVICE, "nix.ru")], policy=get_policy("lenient"))

    assert result.bucket is EligibilityBucket.VERIFIED


def test_classify_entities_groups_by_normalized_name() -> None:
    claims = [
        device_claim("HP LaserJet Pro M106w", "cartridge.ru"),
        device_claim("hp  laserjet pro m106w", "nix.ru"),
        device_claim("HP LaserJet Pro M134a", "nix.ru"),
        device_claim("Canon i-SENSYS MF3010", "spam.example", source_type=SourceType.GENERIC_AGENT),
        make_claim("yield", "9200 pages", domain="nix.ru"),
    ]

    report = classify_entities(claims, policy=STANDARD)

    assert [r.entity for r in report.verified] == ["HP LaserJet Pro M106w"]
    assert [r.entity for r in report.unknown] == ["HP LaserJet Pro M134a"]
    assert [r.entity for r in report.rejected] == ["Canon i-SENSYS MF3010"]
    assert report.total == 3


def test_no_device_claims_give_empty_report() -> None:
    report = classify_entities([make_claim("brand", "HP")], policy=STANDARD)

    assert report.total == 0
    assert report.mean_score == 0.0
