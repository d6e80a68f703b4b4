from __future__ import annotations

import statistics
import time
from dataclasses import asdict, dataclass
from typing import Any, Optional, Sequence

from spalink.parsing.display.state import SpaState, am_from_status


def median(samples: Sequence[int]) -> Optional[float]:
    """Median of the collected samples, or None when nothing was sampled."""
    if not samples:
        return None
    return statistics.median(samples)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Reading:
    """
    One aggregated spa reading, produced once per collection session.

    Attributes:
        timestamp: Milliseconds since the epoch; the storage key.
        temperature: Median of the temperatures seen during the session.
        am: Resolved from the last status byte A seen, not from the final
            frame, so a trailing blank frame does not lose it.
    """
    timestamp: int
    temperature: Optional[float]
    heating: bool = False
    jets_lo: bool = False
    jets_hi: bool = False
    aux_hi: bool = False
    filtering: bool = False
    light_on: bool = False
    edit: bool = False
    am: bool = False
    overheat: bool = False
    jets2_hi: bool = False
    jets2_lo: bool = False
    aux_lo: bool = False

    @classmethod
    def from_state(cls, state: SpaState, samples: Sequence[int], timestamp: Optional[int] = None) -> "Reading":
        temperature = median(samples)
        flags = state.flags()
        flags["am"] = am_from_status(state.last_status_a)
        return cls(
            timestamp=now_ms() if timestamp is None else timestamp,
            temperature=float(temperature) if temperature is not None else None,
            **flags,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
