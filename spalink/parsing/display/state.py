from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from spalink.core.binary import get_bit
from spalink.parsing.display.frame import (
    BlankFrame,
    DisplayFrame,
    EcoFrame,
    TemperatureFrame,
    TimeFrame,
    UnknownFrame,
)

VALID_SOURCES = {"status_a", "status_b"}


@dataclass(frozen=True)
class FlagDefinition:
    source: str
    bit: int
    label: str

    def validate(self) -> None:
        if self.source not in VALID_SOURCES:
            raise ValueError(f"flag source must be one of {sorted(VALID_SOURCES)}")
        if self.bit < 0 or self.bit > 7:
            raise ValueError("bit must be between 0 and 7")


# Status byte A bit 6 and status byte B bits 0-3 are not understood yet and
# are deliberately left unmapped. ``overheat`` has no known bit.
STATUS_FLAGS: dict[str, FlagDefinition] = {
    "heating": FlagDefinition("status_a", 0, "Heating"),
    "aux_hi": FlagDefinition("status_a", 1, "AUX Hi"),
    "jets_lo": FlagDefinition("status_a", 2, "Jets Lo"),
    "jets_hi": FlagDefinition("status_a", 3, "Jets Hi"),
    "filtering": FlagDefinition("status_a", 4, "Filtering"),
    "edit": FlagDefinition("status_a", 5, "Set Mode"),
    "am": FlagDefinition("status_a", 7, "AM"),
    "light_on": FlagDefinition("status_b", 4, "Light"),
    "jets2_hi": FlagDefinition("status_b", 5, "Jets2 Hi"),
    "jets2_lo": FlagDefinition("status_b", 6, "Jets2 Lo"),
    "aux_lo": FlagDefinition("status_b", 7, "AUX Lo"),
}

for _definition in STATUS_FLAGS.values():
    _definition.validate()

AM_BIT = STATUS_FLAGS["am"].bit


@dataclass(frozen=True)
class SpaState:
    current_temp: Optional[int] = None
    heating: bool = False
    aux_hi: bool = False
    jets_lo: bool = False
    jets_hi: bool = False
    filtering: bool = False
    edit: bool = False
    overheat: bool = False
    am: bool = False
    light_on: bool = False
    jets2_hi: bool = False
    jets2_lo: bool = False
    aux_lo: bool = False
    last_status_a: Optional[int] = None

    def flags(self) -> dict[str, bool]:
        return {name: getattr(self, name) for name in FLAG_NAMES}


FLAG_NAMES: tuple[str, ...] = (
    "heating",
    "aux_hi",
    "jets_lo",
    "jets_hi",
    "filtering",
    "edit",
    "overheat",
    "am",
    "light_on",
    "jets2_hi",
    "jets2_lo",
    "aux_lo",
)


def _status_bytes(frame: DisplayFrame) -> tuple[Optional[int], Optional[int]]:
    if isinstance(frame, (TemperatureFrame, TimeFrame, EcoFrame)):
        return frame.status_a, frame.status_b
    if isinstance(frame, UnknownFrame):
        return frame.status_a, frame.status_b
    if isinstance(frame, BlankFrame):
        return None, None
    raise TypeError(f"Unsupported display frame: {frame!r}")


def merge(frame: DisplayFrame, state: SpaState) -> SpaState:
    """
    Fold one decoded frame into the running device state.

    Flags are sticky: a flag only changes when the frame carries the status
    byte it lives in. Blank frames and mode-word frames leave every flag as
    it was. ``current_temp`` only follows temperature frames.
    """
    status_a, status_b = _status_bytes(frame)
    status = {"status_a": status_a, "status_b": status_b}

    updates: dict[str, object] = {}
    for name, definition in STATUS_FLAGS.items():
        value = status[definition.source]
        if value is not None:
            updates[name] = get_bit(value, definition.bit)

    if status_a is not None:
        updates["last_status_a"] = status_a
    if isinstance(frame, TemperatureFrame):
        updates["current_temp"] = frame.value

    return replace(state, **updates) if updates else state


def changed_flags(before: SpaState, after: SpaState) -> list[str]:
    changes = []
    for name, definition in STATUS_FLAGS.items():
        if name == "am":
            continue
        value = getattr(after, name)
        if getattr(before, name) != value:
            changes.append(f"{definition.label}: {'ON' if value else 'OFF'}")
    return changes


def am_from_status(status_a: Optional[int]) -> bool:
    return status_a is not None and get_bit(status_a, AM_BIT)


__all__ = ["FLAG_NAMES", "FlagDefinition", "STATUS_FLAGS", "SpaState", "am_from_status", "changed_flags", "merge"]
