from __future__ import annotations

import unicodedata

from enricher.domain.pipeline import canonical_input, input_hash


def test_hash_ignores_spacing_and_composition() -> None:
    composed = "Картридж HP CF234A чёрный для LaserJet Pro M106w"
    decomposed = unicodedata.normalize("NFD", composed)

    assert decomposed != composed
    assert input_hash(composed) == input_hash(decomposed)
    spaced = "  " + composed.replace(" ", "\t ") + "\n"
    assert input_hash(composed) == input_hash(spaced)


def test_hash_distinguishes_content() -> None:
    assert input_hash("HP CF234A") != input_hash("HP CF230A")
    assert len(input_hash("HP CF234A")) == 64


def test_canonical_input() -> None:
    assert canonical_input("  HP   CF234A\n") == "HP CF234A"
