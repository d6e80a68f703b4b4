import pytest

from spalink.transports.base import SpaTransport, TransportEvent


class FakeTransport(SpaTransport):
    """Replays a scripted sequence of notifications as soon as it connects."""

    def __init__(self, messages=(), opens=True, fail_connect=False, end_with=None):
        self.messages = list(messages)
        self.opens = opens
        self.fail_connect = fail_connect
        self.end_with = end_with
        self.sink = None
        self.close_calls = 0
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    async def connect(self, sink) -> None:
        self.sink = sink
        if isinstance(self.fail_connect, Exception):
            raise self.fail_connect
        if self.fail_connect:
            raise ConnectionError("connection refused")
        if not self.opens:
            return
        self._open = True
        sink(TransportEvent.opened())
        for message in self.messages:
            sink(TransportEvent.message(message))
        if self.end_with is not None:
            sink(self.end_with)

    async def close(self) -> None:
        self.close_calls += 1
        self._open = False


class MemoryStore:
    def __init__(self, fail_with=None):
        self.readings = []
        self.fail_with = fail_with

    def insert_reading(self, reading) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.readings.append(reading)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def make_store():
    return MemoryStore
