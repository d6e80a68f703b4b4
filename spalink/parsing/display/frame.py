from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class TemperatureFrame:
    value: int
    status_a: int
    status_b: int


@dataclass(frozen=True)
class TimeFrame:
    text: str
    status_a: int
    status_b: int


@dataclass(frozen=True)
class EcoFrame:
    status_a: int
    status_b: int


@dataclass(frozen=True)
class BlankFrame:
    pass


@dataclass(frozen=True)
class UnknownFrame:
    """
    A frame that matched no known display pattern.

    ``text`` is only set for recognised mode words ("LO", "OFF", ...). Those
    frames are reported without status bytes so they never touch device
    state.
    """
    raw: bytes
    text: Optional[str] = None
    status_a: Optional[int] = None
    status_b: Optional[int] = None


DisplayFrame = Union[TemperatureFrame, TimeFrame, EcoFrame, BlankFrame, UnknownFrame]

__all__ = ["BlankFrame", "DisplayFrame", "EcoFrame", "TemperatureFrame", "TimeFrame", "UnknownFrame"]
