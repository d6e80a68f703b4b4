from __future__ import annotations

import json
from typing import Any, Optional

from spalink.core.binary import FRAME_LENGTH, low7
from spalink.parsing.display.frame import (
    BlankFrame,
    DisplayFrame,
    EcoFrame,
    TemperatureFrame,
    TimeFrame,
    UnknownFrame,
)
from spalink.parsing.display.segments import FAHRENHEIT_CODE, decode_digit, decode_letter

PATTERN_BLANK = bytes.fromhex("0000000000")
PATTERN_BLANK_COLON = bytes.fromhex("000000000010")
PATTERN_ECON = bytes.fromhex("545c3979")

MODE_WORDS = frozenset({"HI", "LO", "ON", "OFF", "ECO"})

MIN_VALID_TEMP = 45
MAX_VALID_TEMP = 106

AM_INDICATOR = 0x80


def _mode_word(frame: bytes) -> Optional[str]:
    letters = [letter for letter in (decode_letter(b) for b in frame[:4]) if letter is not None]
    if len(letters) < 2:
        return None
    # Display positions run right to left.
    text = "".join(reversed(letters))
    return text if text.upper() in MODE_WORDS else None


def _temperature(frame: bytes) -> Optional[int]:
    if low7(frame[0]) != FAHRENHEIT_CODE:
        return None
    hundreds = decode_digit(frame[3])
    tens = decode_digit(frame[2])
    ones = decode_digit(frame[1])
    if tens is None or ones is None:
        return None

    if hundreds == 1:
        temp = 100 + tens * 10 + ones
        if 100 <= temp <= MAX_VALID_TEMP:
            return temp

    temp = tens * 10 + ones
    if MIN_VALID_TEMP <= temp <= 99:
        return temp
    return None


def _clock_text(frame: bytes) -> Optional[str]:
    minute_ones = decode_digit(frame[0])
    minute_tens = decode_digit(frame[1])
    hour_ones = decode_digit(frame[2])
    hour_tens = decode_digit(frame[3])
    if minute_ones is None or minute_tens is None or hour_ones is None:
        return None

    minutes = minute_tens * 10 + minute_ones
    hours = (hour_tens * 10 if hour_tens else 0) + hour_ones
    suffix = " AM" if frame[4] & AM_INDICATOR else ""
    return f"{hours}:{minutes:02d}{suffix}"


def classify(frame: bytes) -> DisplayFrame:
    """
    Interpret a 6-byte display frame.

    Patterns are tried in a fixed order and the first match wins: blank,
    economy mode, mode words, Fahrenheit temperature, clock. Anything else is
    reported as ``UnknownFrame`` with its status bytes.

    Raises:
        ValueError: If ``frame`` is not exactly 6 bytes. Use ``parse_dsp`` to
            build frames from the wire value.
    """
    frame = bytes(frame)
    if len(frame) != FRAME_LENGTH:
        raise ValueError(f"Display frame must be {FRAME_LENGTH} bytes, got {len(frame)}")

    status_a, status_b = frame[4], frame[5]

    if frame[:5] == PATTERN_BLANK or frame == PATTERN_BLANK_COLON:
        return BlankFrame()

    if frame[:4] == PATTERN_ECON:
        return EcoFrame(status_a=status_a, status_b=status_b)

    word = _mode_word(frame)
    if word is not None:
        return UnknownFrame(raw=frame, text=word)

    temp = _temperature(frame)
    if temp is not None:
        return TemperatureFrame(value=temp, status_a=status_a, status_b=status_b)

    clock = _clock_text(frame)
    if clock is not None:
        return TimeFrame(text=clock, status_a=status_a, status_b=status_b)

    return UnknownFrame(raw=frame, status_a=status_a, status_b=status_b)


def describe(frame: DisplayFrame) -> str:
    if isinstance(frame, TemperatureFrame):
        return f"Temp: {frame.value}°F"
    if isinstance(frame, TimeFrame):
        return f"Time: {frame.text}"
    if isinstance(frame, EcoFrame):
        return "Mode: ECOn"
    if isinstance(frame, BlankFrame):
        return "Blank"
    if isinstance(frame, UnknownFrame):
        return f"Unknown: {frame.text or frame.raw.hex(' ')}"
    raise TypeError(f"Unsupported display frame: {frame!r}")


def load_message(message: str | bytes) -> Optional[dict[str, Any]]:
    try:
        payload = json.loads(message)
    except (TypeError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None
