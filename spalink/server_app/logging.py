import logging
import threading
from collections import deque
from typing import Deque, Dict, List, Optional

REDACTED_KEYS = {"spa_token", "token", "url"}


class RingBufferHandler(logging.Handler):
    def __init__(self, max_entries: int = 200):
        super().__init__()
        self.max_entries = max_entries
        self._events: Deque[Dict] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        event = {
            "event": record.getMessage(),
            "level": record.levelname,
            "ts": record.created,
            "details": redact(getattr(record, "details", {})),
        }
        with self._lock:
            self._events.append(event)

    def get_events(self) -> List[Dict]:
        with self._lock:
            return list(self._events)


class DetailsFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        details = redact(getattr(record, "details", {}))
        if details:
            line += " " + " ".join(f"{key}={value}" for key, value in details.items())
        return line


def create_logger(name: str, ring_size: int, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level.upper())
    ring = RingBufferHandler(max_entries=ring_size)
    ring.setLevel(logging.INFO)
    console = logging.StreamHandler()
    console.setFormatter(DetailsFormatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(ring)
    logger.addHandler(console)
    logger.propagate = False
    return logger


def ring_handler(logger: logging.Logger) -> Optional[RingBufferHandler]:
    for handler in logger.handlers:
        if isinstance(handler, RingBufferHandler):
            return handler
    return None


def redact(details: Optional[dict]) -> dict:
    if not details:
        return {}
    cleaned = {}
    for key, value in details.items():
        if key in REDACTED_KEYS:
            cleaned[key] = "***"
        else:
            cleaned[key] = value
    return cleaned
