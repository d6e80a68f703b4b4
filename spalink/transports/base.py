from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class EventKind(str, Enum):
    OPENED = "opened"
    MESSAGE = "message"
    CLOSED = "closed"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class TransportEvent:
    kind: EventKind
    payload: str | bytes | None = None
    code: Optional[int] = None
    reason: str = ""
    error: Optional[BaseException] = None

    @classmethod
    def opened(cls) -> "TransportEvent":
        return cls(EventKind.OPENED)

    @classmethod
    def message(cls, payload: str | bytes) -> "TransportEvent":
        return cls(EventKind.MESSAGE, payload=payload)

    @classmethod
    def closed(cls, code: Optional[int] = None, reason: str = "") -> "TransportEvent":
        return cls(EventKind.CLOSED, code=code, reason=reason)

    @classmethod
    def failed(cls, error: BaseException) -> "TransportEvent":
        return cls(EventKind.ERROR, error=error)

    @classmethod
    def timeout(cls) -> "TransportEvent":
        return cls(EventKind.TIMEOUT)


EventSink = Callable[[TransportEvent], None]


class SpaTransport(ABC):
    """
    A connection to the spa controller's display feed.

    Implementations push every notification through the sink handed to
    ``connect`` and never call back into the session directly. The sink must
    only be called from the event loop thread.
    """

    @abstractmethod
    async def connect(self, sink: EventSink) -> None:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...
