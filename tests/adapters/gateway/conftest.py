"""Shared fixtures for research gateway adapter tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def research_payload() -> dict[str, object]:
    return {
        "summary": " HP 34A black toner ",
        "claims": [
            {
                "field": "Brand",
                "value": "HP",
                "source_type": "Official",
                "domain": "https://www.hp.com/ru-ru/shop",
                "confidence": 0.95,
                "extraction_method": "spec_table",
            },
            {
                "field": "compatible_device",
                "value": "HP LaserJet Pro M106w",
                "source_type": "curated_retailer",
                "domain": "nix.ru",
                "confidence": 0.9,
            },
            {
                "field": "yield",
                "value": 9200,
                "source_type": "generic_agent",
                "domain": "blog.example",
                "confidence": 0.6,
                "rank": 3,
            },
        ],
        "source_domains": ["https://www.cartridge.ru/item/1", "nix.ru"],
        "took_ms": 812,
    }
