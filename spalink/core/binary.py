from __future__ import annotations

import string

FRAME_LENGTH = 6
SHORT_FRAME_LENGTH = 5


def get_bit(byte_value: int, bit_index: int) -> bool:
    if bit_index < 0 or bit_index > 7:
        raise ValueError("bit_index must be between 0 and 7")
    return bool(byte_value & (1 << bit_index))


def low7(byte_value: int) -> int:
    return byte_value & 0x7F


def parse_dsp(value: str) -> bytes:
    """
    Convert a ``dsp`` hex string into a 6-byte display frame.

    The controller sometimes omits the last status byte, so 10-character
    values are zero-padded on the right to 12 characters.

    Raises:
        ValueError: If the value is not 10 or 12 hex characters.
    """
    if not isinstance(value, str):
        raise ValueError(f"dsp must be a string, got {type(value).__name__}")
    cleaned = value.strip()
    if len(cleaned) not in (SHORT_FRAME_LENGTH * 2, FRAME_LENGTH * 2):
        raise ValueError(f"dsp must be 10 or 12 hex characters, got {len(cleaned)}")
    if any(ch not in string.hexdigits for ch in cleaned):
        raise ValueError(f"dsp is not valid hex: {cleaned!r}")
    return bytes.fromhex(cleaned.ljust(FRAME_LENGTH * 2, "0"))

