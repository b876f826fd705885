"""Keyword detection for consumable type, color and compatible devices."""

from __future__ import annotations

import re
from dataclasses import dataclass

from enricher.domain.model import ConsumableType


@dataclass(frozen=True, slots=True, kw_only=True)
class AttributeDetection:
    value: str
    confidence: float
    method: str

    @property
    def found(self) -> bool:
        return bool(self.value)


NOT_FOUND = AttributeDetection(value="", confidence=0.0, method="")

_DRUM = re.compile(
    r"drum|драм|фотобарабан|копи-картридж|оптический блок|imaging unit|image unit",
    re.IGNORECASE,
)
_TONER = re.compile(r"toner|тонер|cartridge|картридж|laser|лазерн", re.IGNORECASE)
_WASTE = re.compile(r"waste|бункер|отработ", re.IGNORECASE)
_INK = re.compile(r"\bink\b|чернил|струйн", re.IGNORECASE)

_COLORS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Black", re.compile(r"\b(black|bk|черный|чёрный)\b", re.IGNORECASE)),
    ("Cyan", re.compile(r"\b(cyan|голубой|синий)\b", re.IGNORECASE)),
    ("Magenta", re.compile(r"\b(magenta|пурпурный|магента)\b", re.IGNORECASE)),
    ("Yellow", re.compile(r"\b(yellow|желтый|жёлтый)\b", re.IGNORECASE)),
)

_DEVICE_BLOCK = re.compile(
    r"\b(?:for|для|совместим(?:ый)? с)\s+(?P<block>[\w\s/.,+-]+)", re.IGNORECASE
)
_DEVICE_SPLIT = re.compile(r"\s*(?:[/,;]|\band\b|\bи\b)\s*", re.IGNORECASE)


def detect_type(text: str) -> AttributeDetection:
    # Drum keywords outrank toner: "drum cartridge" is a drum unit.
    if _DRUM.search(text):
        return AttributeDetection(
            value=ConsumableType.DRUM_UNIT, confidence=0.95, method="keyword_match"
        )
    if _TONER.search(text):
        if _WASTE.search(text):
            return AttributeDetection(
                value=ConsumableType.WASTE_TONER, confidence=0.8, method="waste_check"
            )
        return AttributeDetection(
            value=ConsumableType.TONER_CARTRIDGE, confidence=0.9, method="keyword_match"
        )
    if _INK.search(text):
        return AttributeDetection(
            value=ConsumableType.INK_CARTRIDGE, confidence=0.9, method="keyword_match"
        )
    return NOT_FOUND


def detect_color(text: str) -> AttributeDetection:
    for color, pattern in _COLORS:
        if pattern.search(text):
            return AttributeDetection(value=color, confidence=0.95, method="keyword")
    return NOT_FOUND


def extract_device_candidates(text: str) -> tuple[str, ...]:
    """Split the ``for ...`` / ``для ...`` block into printer names."""

    match = _DEVICE_BLOCK.search(text)
    if match is None:
        return ()
    seen: dict[str, None] = {}
    for part in _DEVICE_SPLIT.split(match.group("block")):
        name = part.strip(" .-")
        if len(name) > 2:
            seen.setdefault(name, None)
    return tuple(seen)
