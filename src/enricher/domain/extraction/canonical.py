"""Unicode and separator canonicalization of supplier titles."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile("[‐‑‒–—―−]")
_DOUBLE_QUOTES = re.compile("[“”„«»]")
_SINGLE_QUOTES = re.compile("[‘’‚]")


@dataclass(frozen=True, slots=True, kw_only=True)
class NormalizationStep:
    step: str
    before: str
    after: str


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def canonicalize_title(raw: str) -> tuple[str, tuple[NormalizationStep, ...]]:
    """Return the canonical title and the steps that actually changed it."""

    steps: list[NormalizationStep] = []
    result = raw

    def apply(name: str, value: str) -> None:
        nonlocal result
        if value != result:
            steps.append(NormalizationStep(step=name, before=result, after=value))
            result = value

    apply("unicode_normalization", unicodedata.normalize("NFC", result))
    apply("whitespace_normalization", collapse_whitespace(result))
    separators = _DASHES.sub("-", result)
    separators = _DOUBLE_QUOTES.sub('"', separators)
    separators = _SINGLE_QUOTES.sub("'", separators)
    apply("separator_normalization", separators)
    return result, tuple(steps)
