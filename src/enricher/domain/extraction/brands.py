"""Brand detection: explicit mention, then model prefix, then product line."""

from __future__ import annotations

import re
from dataclasses import dataclass

TITLE_MATCH_CONFIDENCE = 0.95
PREFIX_MATCH_FACTOR = 0.9
CONTEXT_CONFIDENCE = 0.8


@dataclass(frozen=True, slots=True, kw_only=True)
class BrandProfile:
    brand: str
    patterns: tuple[re.Pattern[str], ...]
    model_prefixes: tuple[str, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class BrandDetection:
    brand: str
    confidence: float
    method: str

    @property
    def found(self) -> bool:
        return bool(self.brand)


def _profile(brand: str, patterns: tuple[str, ...], prefixes: tuple[str, ...]) -> BrandProfile:
    return BrandProfile(
        brand=brand,
        patterns=tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns),
        model_prefixes=prefixes,
    )


BRAND_PROFILES: tuple[BrandProfile, ...] = (
    _profile(
        "HP",
        (r"\bhp\b", r"hewlett[- ]?packard"),
        ("CF", "CE", "CC", "CB", "Q", "C9", "C8", "C7", "W1", "W2"),
    ),
    _profile("Canon", (r"\bcanon\b", r"\bкэнон\b"), ("CRG", "PGI", "CLI", "BCI", "PFI")),
    _profile("Brother", (r"\bbrother\b",), ("TN", "DR", "LC")),
    _profile("Kyocera", (r"\bkyocera\b", r"\bmita\b"), ("TK", "DK", "MK")),
    _profile("Epson", (r"\bepson\b",), ("T0", "T1", "T2", "T3", "C13")),
    _profile("Samsung", (r"\bsamsung\b",), ("MLT", "CLT", "SCX")),
    _profile("Xerox", (r"\bxerox\b",), ("106R", "108R", "113R")),
    _profile("Lexmark", (r"\blexmark\b",), ("C5", "E5", "X5", "24", "25", "26", "27")),
    _profile("OKI", (r"\boki\b", r"\bokidata\b"), ("44", "45", "46", "47")),
    _profile("Ricoh", (r"\bricoh\b",), ("SP", "MP", "TYPE")),
)

# Product lines that only one manufacturer sells.
_CONTEXT_LINES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("HP", re.compile(r"\b(laserjet|deskjet|officejet|pagewide)\b", re.IGNORECASE)),
    ("Canon", re.compile(r"\b(pixma|imageclass|maxify|i-sensys)\b", re.IGNORECASE)),
    ("Brother", re.compile(r"\b(mfc|dcp|hl)\b", re.IGNORECASE)),
)

NO_BRAND = BrandDetection(brand="", confidence=0.0, method="")


def detect_brand(text: str, model: str | None = None) -> BrandDetection:
    for profile in BRAND_PROFILES:
        if any(pattern.search(text) for pattern in profile.patterns):
            return BrandDetection(
                brand=profile.brand,
                confidence=TITLE_MATCH_CONFIDENCE,
                method="title_text_match",
            )

    if model:
        upper = model.upper()
        for profile in BRAND_PROFILES:
            if any(upper.startswith(prefix) for prefix in profile.model_prefixes):
                return BrandDetection(
                    brand=profile.brand,
                    confidence=TITLE_MATCH_CONFIDENCE * PREFIX_MATCH_FACTOR,
                    method="model_prefix_match",
                )

    for brand, pattern in _CONTEXT_LINES:
        if pattern.search(text):
            return BrandDetection(
                brand=brand, confidence=CONTEXT_CONFIDENCE, method="context_pattern"
            )

    return NO_BRAND
