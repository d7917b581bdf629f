"""Test color parsing.

Tests for src.utils.color:
    - Named colors (case-insensitive)
    - 6- and 8-digit hex, with or without '#'
    - Channel sequences (3 → opaque, 4 → as given)
    - Invalid input raises ValueError("invalid color format")

Run:
    pytest tests/test_color.py -v
"""

import pytest

from src.utils import color


@pytest.mark.parametrize("value,expected", [
    ("red", (255, 0, 0, 255)),
    ("White", (255, 255, 255, 255)),
    (" orange ", (255, 165, 0, 255)),
    ("000000", (0, 0, 0, 255)),
    ("#1f3a93", (31, 58, 147, 255)),
    ("00FF0080", (0, 255, 0, 128)),
    ((1, 2, 3), (1, 2, 3, 255)),
    ([4, 5, 6, 7], (4, 5, 6, 7)),
])
def test_parse_color(value, expected):
    assert color.parse_color(value) == expected


@pytest.mark.parametrize("value", ["", "12345", "gggggg", "not-a-color", "#1234567", "-10000", "+fffff", "0x1234"])
def test_parse_color_invalid_string(value):
    with pytest.raises(ValueError, match="invalid color format"):
        color.parse_color(value)


@pytest.mark.parametrize("value", [(1, 2), (1, 2, 3, 4, 5), (0, 0, 300)])
def test_parse_color_invalid_sequence(value):
    with pytest.raises(ValueError):
        color.parse_color(value)


def test_hex_to_rgba_requires_bare_hex():
    assert color.hex_to_rgba("0a0b0c") == (10, 11, 12, 255)
    with pytest.raises(ValueError):
        color.hex_to_rgba("#0a0b0c")


def test_every_name_parses():
    for name in color.COLOR_NAMES:
        rgba = color.parse_color(name)
        assert len(rgba) == 4 and rgba[3] == 255


@pytest.mark.parametrize("value", ["-10000", "+1+2+3", "1_2_34", " 12345"])
def test_hex_to_rgba_rejects_signs_and_separators(value):
    with pytest.raises(ValueError, match="invalid color format"):
        color.hex_to_rgba(value)
