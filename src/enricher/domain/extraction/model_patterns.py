"""Consumable model identifier cascade."""

from __future__ import annotations

import re
from dataclasses import dataclass

GENERIC_PRIORITY = 10
MULTI_CANDIDATE_FACTOR = 0.9
MULTI_CANDIDATE_FLOOR = 0.6


@dataclass(frozen=True, slots=True, kw_only=True)
class PatternFamily:
    name: str
    pattern: re.Pattern[str]
    priority: int
    confidence: float


@dataclass(frozen=True, slots=True, kw_only=True)
class ModelCandidate:
    model: str
    family: str
    priority: int
    position: int


@dataclass(frozen=True, slots=True, kw_only=True)
class ModelExtraction:
    model: str
    method: str
    confidence: float
    candidates: tuple[ModelCandidate, ...] = ()
    ambiguous: bool = False

    @property
    def found(self) -> bool:
        return bool(self.model)


# Ordered most specific first; lower priority number wins.
MODEL_FAMILIES: tuple[PatternFamily, ...] = (
    PatternFamily(
        name="two_letter_dash",  # TN-1150, DR-3400, DK-7105
        pattern=re.compile(r"\b([A-Z]{2}-\d{4,5})\b"),
        priority=1,
        confidence=0.9,
    ),
    PatternFamily(
        name="three_letter_dash",  # CRG-045, PGI-580, CLI-581
        pattern=re.compile(r"\b([A-Z]{3}-\d{3}[A-Z]?)\b"),
        priority=2,
        confidence=0.9,
    ),
    PatternFamily(
        name="hp_standard",  # CF234A, Q2612A
        pattern=re.compile(r"\b([A-Z]{1,2}\d{3,5}[A-Z]?)\b"),
        priority=3,
        confidence=0.9,
    ),
    PatternFamily(
        name="epson",  # T0711, 16XL, 603XL
        pattern=re.compile(r"\b(T\d{4}|\d{2,3}XL?)\b"),
        priority=4,
        confidence=0.85,
    ),
    PatternFamily(
        name="xerox",  # 106R03623
        pattern=re.compile(r"\b(\d{3}R\d{5})\b"),
        priority=5,
        confidence=0.85,
    ),
)

GENERIC_FAMILY = PatternFamily(
    name="generic",
    pattern=re.compile(r"\b([A-Z]\d{4,6}[A-Z]?|\d{3,4}[A-Z]{1,2})\b"),
    priority=GENERIC_PRIORITY,
    confidence=0.7,
)


def find_model_candidates(text: str) -> tuple[ModelCandidate, ...]:
    candidates: list[ModelCandidate] = []
    for family in MODEL_FAMILIES:
        candidates.extend(
            ModelCandidate(
                model=match.group(1),
                family=family.name,
                priority=family.priority,
                position=match.start(1),
            )
            for match in family.pattern.finditer(text)
        )
    known = {candidate.model for candidate in candidates}
    for match in GENERIC_FAMILY.pattern.finditer(text):
        model = match.group(1)
        if model in known or len(model) < 4:
            continue
        known.add(model)
        candidates.append(
            ModelCandidate(
                model=model,
                family=GENERIC_FAMILY.name,
                priority=GENERIC_FAMILY.priority,
                position=match.start(1),
            )
        )
    return tuple(sorted(candidates, key=lambda c: (c.priority, c.position)))


def extract_model(text: str) -> ModelExtraction:
    """Pick the best model identifier in ``text``.

    The highest-priority family wins and ties go to the earliest position.
    Confidence drops when the title holds more than one distinct candidate;
    two distinct candidates sharing the winning priority flag ambiguity.
    """

    candidates = find_model_candidates(text)
    if not candidates:
        return ModelExtraction(model="", method="", confidence=0.0)

    best = candidates[0]
    confidence = _FAMILY_CONFIDENCE[best.family]
    distinct = {candidate.model for candidate in candidates}
    if len(distinct) > 1:
        confidence = max(confidence * MULTI_CANDIDATE_FACTOR, MULTI_CANDIDATE_FLOOR)
    rivals = {
        candidate.model
        for candidate in candidates
        if candidate.priority == best.priority and candidate.model != best.model
    }
    return ModelExtraction(
        model=best.model,
        method=f"{best.family}_pattern",
        confidence=confidence,
        candidates=candidates,
        ambiguous=bool(rivals),
    )


_FAMILY_CONFIDENCE = {
    family.name: family.confidence for family in (*MODEL_FAMILIES, GENERIC_FAMILY)
}
