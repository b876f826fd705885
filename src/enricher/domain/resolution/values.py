"""Field-aware value normalization used to decide whether claims agree."""

from __future__ import annotations

import re

from enricher.domain.extraction import collapse_whitespace, format_amount, parse_yield
from enricher.domain.model import FieldName

_MODEL_NOISE = re.compile(r"[\s\-/.]+")


def normalize_value(field_name: str, value: str) -> str:
    """Comparison key for ``value``; never shown to users."""

    match field_name:
        case FieldName.YIELD:
            parsed = parse_yield(value)
            if parsed is not None:
                amount, unit = parsed
                return f"{format_amount(amount)} {unit.value}"
            return collapse_whitespace(value).casefold()
        case FieldName.MODEL:
            return _MODEL_NOISE.sub("", value).upper()
        case _:
            return collapse_whitespace(value).casefold()


def values_agree(field_name: str, left: str, right: str) -> bool:
    return normalize_value(field_name, left) == normalize_value(field_name, right)
