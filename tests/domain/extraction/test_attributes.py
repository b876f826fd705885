from __future__ import annotations

import pytest

from enricher.domain.extraction import detect_color, detect_type, extract_device_candidates
from enricher.domain.model import ConsumableType


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Brother DR-3400 drum cartridge", ConsumableType.DRUM_UNIT),
        ("Фотобарабан Kyocera DK-1150", ConsumableType.DRUM_UNIT),
        ("HP CF234A Toner Cartridge", ConsumableType.TONER_CARTRIDGE),
        ("Waste toner box", ConsumableType.WASTE_TONER),
        ("Epson 603XL ink bottle", ConsumableType.INK_CARTRIDGE),
    ],
)
def test_detect_type(title: str, expected: ConsumableType) -> None:
    assert detect_type(title).value == expected


def test_detect_type_without_keywords() -> None:
    assert not detect_type("Spare part 12345").found


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Toner black", "Black"),
        ("TN-1150 BK", "Black"),
        ("Картридж голубой", "Cyan"),
        ("Cartridge C", ""),
    ],
)
def test_detect_color(title: str, expected: str) -> None:
    assert detect_color(title).value == expected


def test_device_block_is_split_into_names() -> None:
    devices = extract_device_candidates(
        "Toner TN-1150 for Brother HL-1110 / HL-1210W, DCP-1510"
    )

    assert devices == ("Brother HL-1110", "HL-1210W", "DCP-1510")


def test_no_device_block() -> None:
    assert extract_device_candidates("HP CF234A Toner") == ()
