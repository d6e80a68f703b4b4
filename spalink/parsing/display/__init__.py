from spalink.parsing.display.decode import classify, describe, load_message
from spalink.parsing.display.frame import (
    BlankFrame,
    DisplayFrame,
    EcoFrame,
    TemperatureFrame,
    TimeFrame,
    UnknownFrame,
)
from spalink.parsing.display.segments import decode_digit, decode_letter
from spalink.parsing.display.state import SpaState, changed_flags, merge

__all__ = [
    "BlankFrame",
    "DisplayFrame",
    "EcoFrame",
    "SpaState",
    "TemperatureFrame",
    "TimeFrame",
    "UnknownFrame",
    "changed_flags",
    "classify",
    "decode_digit",
    "decode_letter",
    "describe",
    "load_message",
    "merge",
]
