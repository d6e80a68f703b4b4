"""
Seven-segment lookup tables for the SmartLink panel display.

Both tables are keyed by the low 7 bits of a display byte; bit 7 is an
indicator (colon, AM) and never part of the glyph.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from spalink.core.binary import low7

# A blank digit (0x00) reads as 0 when it sits in a leading position.
SEVEN_SEGMENT_DIGITS: Mapping[int, int] = MappingProxyType(
    {
        0x00: 0,
        0x3F: 0,
        0x06: 1,
        0x5B: 2,
        0x4F: 3,
        0x66: 4,
        0x6D: 5,
        0x7D: 6,
        0x07: 7,
        0x7F: 8,
        0x6F: 9,
    }
)

SEVEN_SEGMENT_LETTERS: Mapping[int, str] = MappingProxyType(
    {
        0x79: "E",
        0x39: "C",
        0x5C: "o",
        0x54: "n",
        0x71: "F",
        0x76: "H",
        0x38: "L",
        0x3E: "U",
        0x73: "P",
    }
)

FAHRENHEIT_CODE = 0x71


def decode_digit(byte_value: int) -> Optional[int]:
    return SEVEN_SEGMENT_DIGITS.get(low7(byte_value))


def decode_letter(byte_value: int) -> Optional[str]:
    return SEVEN_SEGMENT_LETTERS.get(low7(byte_value))


__all__ = [
    "FAHRENHEIT_CODE",
    "SEVEN_SEGMENT_DIGITS",
    "SEVEN_SEGMENT_LETTERS",
    "decode_digit",
    "decode_letter",
]
