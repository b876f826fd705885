"""Deterministic identity of raw inputs."""

from __future__ import annotations

import hashlib
import unicodedata

from enricher.domain.extraction import collapse_whitespace


def canonical_input(raw: str) -> str:
    return collapse_whitespace(unicodedata.normalize("NFC", raw))


def input_hash(raw: str) -> str:
    """SHA-256 of the NFC, whitespace-collapsed input.

    Inputs that differ only in Unicode composition or spacing share a hash
    and are therefore treated as the same logical item.
    """

    return hashlib.sha256(canonical_input(raw).encode("utf-8")).hexdigest()
