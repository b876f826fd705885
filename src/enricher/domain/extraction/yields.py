"""Yield shorthand standardization.

Supplier titles write page yields as ``15K``, ``300К`` (Cyrillic Ka),
``9,2K`` or with an explicit unit (``2500 pages``, ``2500стр``,
``70 мл``). Every form is converted into an absolute amount with a unit.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal

from enricher.domain.model import YieldUnit

K_MULTIPLIER_CONFIDENCE = 0.9
EXPLICIT_UNIT_CONFIDENCE = 0.95

_YIELD = re.compile(
    r"(?<![\w.,])(?P<number>\d+(?:[.,]\d+)?)\s*"
    r"(?P<multiplier>[KkКк](?![\w]))?"
    r"(?:\s*(?P<unit>pages?|copies|copy|страниц[аы]?|стр\.?|копий|жизней|мл|ml)(?![\w]))?",
    re.IGNORECASE,
)

_UNIT_ALIASES: dict[str, YieldUnit] = {
    "copies": YieldUnit.COPIES,
    "copy": YieldUnit.COPIES,
    "копий": YieldUnit.COPIES,
    "мл": YieldUnit.ML,
    "ml": YieldUnit.ML,
}


@dataclass(frozen=True, slots=True, kw_only=True)
class YieldExtraction:
    amount: Decimal
    unit: YieldUnit
    original_text: str
    confidence: float

    def render(self) -> str:
        return f"{format_amount(self.amount)} {self.unit.value}"


def format_amount(amount: Decimal) -> str:
    if amount == amount.to_integral_value():
        return str(int(amount))
    return format(amount.normalize(), "f")


def _unit_for(token: str) -> YieldUnit:
    return _UNIT_ALIASES.get(token.lower().rstrip("."), YieldUnit.PAGES)


def standardize_yields(text: str) -> tuple[str, tuple[YieldExtraction, ...]]:
    """Expand multiplier shorthand in ``text`` and collect every yield found.

    ``9.2K pages`` produces a single extraction (9200 pages); the explicit
    unit wins over the ``pages`` default of a bare multiplier.
    """

    extractions: list[YieldExtraction] = []

    def replace(match: re.Match[str]) -> str:
        multiplier = match.group("multiplier")
        unit = match.group("unit")
        if not multiplier and not unit:
            return match.group(0)
        amount = Decimal(match.group("number").replace(",", "."))
        if multiplier:
            amount *= 1000
        extractions.append(
            YieldExtraction(
                amount=amount,
                unit=_unit_for(unit) if unit else YieldUnit.PAGES,
                original_text=match.group(0).strip(),
                confidence=EXPLICIT_UNIT_CONFIDENCE if unit else K_MULTIPLIER_CONFIDENCE,
            )
        )
        if not multiplier:
            return match.group(0)
        rendered = format_amount(amount)
        return f"{rendered} {unit}" if unit else rendered

    converted = _YIELD.sub(replace, text)
    return converted, tuple(extractions)


def parse_yield(value: str) -> tuple[Decimal, YieldUnit] | None:
    """Parse a rendered or raw yield value into ``(amount, unit)``."""

    _, extractions = standardize_yields(value.strip())
    if extractions:
        first = extractions[0]
        return first.amount, first.unit
    bare = value.strip().replace(" ", "")
    if bare.isdigit():
        return Decimal(bare), YieldUnit.PAGES
    return None
