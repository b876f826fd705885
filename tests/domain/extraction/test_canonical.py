from __future__ import annotations

from enricher.domain.extraction import canonicalize_title


def test_clean_title_has_no_steps() -> None:
    title, steps = canonicalize_title("Brother TN-1150 Toner")

    assert title == "Brother TN-1150 Toner"
    assert steps == ()


def test_each_changing_step_is_logged() -> None:
    raw = "Картридж  Canon CRG–045  «Black»"

    title, steps = canonicalize_title(raw)

    assert title == 'Картридж Canon CRG-045 "Black"'
    assert [step.step for step in steps] == [
        "whitespace_normalization",
        "separator_normalization",
    ]
    assert steps[0].before == raw
    assert steps[-1].after == title


def test_decomposed_input_is_composed() -> None:
    title, steps = canonicalize_title("Тонер ч\u0435\u0308рный")

    assert title == "Тонер ч\u0451рный"
    assert steps[0].step == "unicode_normalization"
