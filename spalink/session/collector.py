from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional, Protocol

from spalink.core.binary import parse_dsp
from spalink.domain.reading import Reading, now_ms
from spalink.parsing.display.decode import classify, describe, load_message
from spalink.parsing.display.frame import TemperatureFrame
from spalink.parsing.display.state import SpaState, changed_flags, merge
from spalink.transports.base import EventKind, SpaTransport, TransportEvent

TARGET_SAMPLES = 3
SESSION_TIMEOUT_SECONDS = 30.0


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    COLLECTING = "collecting"
    FINALIZING = "finalizing"
    CLOSED = "closed"


class SessionStateError(RuntimeError):
    pass


class ReadingSink(Protocol):
    def insert_reading(self, reading: Reading) -> None:
        ...


class CollectionSession:
    """
    One bounded sampling cycle over a transport.

    The session connects, decodes display frames until it has
    ``target_samples`` temperatures, the timeout fires or the transport goes
    away, then stores exactly one ``Reading``. Transport notifications and the
    timeout timer only enqueue events; ``run`` is the single consumer, so
    frames are merged strictly in arrival order and whichever termination
    event is dequeued first wins.

    A session object runs once. Running it again raises ``SessionStateError``.
    """

    def __init__(
        self,
        transport: SpaTransport,
        storage: ReadingSink,
        target_samples: int = TARGET_SAMPLES,
        timeout: float = SESSION_TIMEOUT_SECONDS,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        if target_samples < 1:
            raise ValueError("target_samples must be at least 1")
        self.transport = transport
        self.storage = storage
        self.target_samples = target_samples
        self.timeout = timeout
        self.logger = logger or logging.getLogger("spalink")
        self._clock = clock

        self.state = SessionState.IDLE
        self.spa_state = SpaState()
        self.samples: list[int] = []
        self.reading: Optional[Reading] = None
        self.end_reason: Optional[str] = None
        self._inbox: asyncio.Queue[TransportEvent] = asyncio.Queue()
        self._timer: Optional[asyncio.TimerHandle] = None
        self._sts_i = None

    @property
    def timer_pending(self) -> bool:
        return self._timer is not None and not self._timer.cancelled()

    async def run(self) -> Reading:
        if self.state is not SessionState.IDLE:
            raise SessionStateError(f"Session cannot run from state '{self.state.value}'")

        loop = asyncio.get_running_loop()
        self._enter(SessionState.CONNECTING)
        self._timer = loop.call_later(self.timeout, self._post, TransportEvent.timeout())
        try:
            await self._connect()
            reason = await self._collect()
            reading = await self._finalize(reason)
        except asyncio.CancelledError:
            await self._abort()
            raise

        try:
            self.storage.insert_reading(reading)
        finally:
            self._enter(SessionState.CLOSED)
        self.logger.info(
            "reading_stored",
            extra={"details": {"timestamp": reading.timestamp, "temperature": reading.temperature, "reason": reason}},
        )
        return reading

    def _post(self, event: TransportEvent) -> None:
        self._inbox.put_nowait(event)

    async def _connect(self) -> None:
        try:
            await asyncio.wait_for(self.transport.connect(self._post), timeout=self.timeout)
        except asyncio.TimeoutError:
            # The session timer fires at the same deadline and ends the cycle.
            self.logger.warning("transport_connect_timeout", extra={"details": {"timeout": self.timeout}})
        except Exception as exc:
            self._post(TransportEvent.failed(exc))

    async def _collect(self) -> str:
        while True:
            event = await self._inbox.get()
            reason = self._handle(event)
            if reason is not None:
                return reason

    def _handle(self, event: TransportEvent) -> Optional[str]:
        if event.kind is EventKind.OPENED:
            if self.state is SessionState.CONNECTING:
                self._enter(SessionState.COLLECTING)
            return None
        if event.kind is EventKind.MESSAGE:
            self._on_message(event.payload)
            if len(self.samples) >= self.target_samples:
                return "samples"
            return None
        if event.kind is EventKind.CLOSED:
            self.logger.info("transport_closed", extra={"details": {"code": event.code, "reason": event.reason}})
            return "closed"
        if event.kind is EventKind.ERROR:
            self.logger.warning("transport_error", extra={"details": {"error": str(event.error)}})
            return "error"
        if event.kind is EventKind.TIMEOUT:
            self.logger.info("session_timeout", extra={"details": {"samples": len(self.samples)}})
            return "timeout"
        raise SessionStateError(f"Unhandled transport event: {event.kind!r}")

    def _on_message(self, message) -> None:
        payload = load_message(message)
        if payload is None:
            self.logger.debug("payload_ignored", extra={"details": {"reason": "not a JSON object"}})
            return

        if "stsR" in payload:
            self.logger.debug("connection_status", extra={"details": {"stsR": payload["stsR"]}})
        if "stsI" in payload and payload["stsI"] != self._sts_i:
            self._sts_i = payload["stsI"]
            self.logger.debug("connection_status", extra={"details": {"stsI": self._sts_i}})

        dsp = payload.get("dsp")
        if not dsp:
            return
        try:
            frame = classify(parse_dsp(dsp))
        except ValueError as exc:
            self.logger.debug("payload_ignored", extra={"details": {"reason": str(exc)}})
            return

        before = self.spa_state
        self.spa_state = merge(frame, before)
        if isinstance(frame, TemperatureFrame):
            self.samples.append(frame.value)

        interpretation = changed_flags(before, self.spa_state) + [describe(frame)]
        self.logger.debug("display_frame", extra={"details": {"dsp": dsp, "interpretation": " | ".join(interpretation)}})

    async def _finalize(self, reason: str) -> Reading:
        if self.state in (SessionState.FINALIZING, SessionState.CLOSED):
            raise SessionStateError(f"Session already {self.state.value}")
        self._enter(SessionState.FINALIZING)
        self.end_reason = reason
        self._cancel_timer()

        reading = Reading.from_state(self.spa_state, self.samples, timestamp=self._clock())
        self.reading = reading
        await self._close_transport()
        return reading

    async def _abort(self) -> None:
        self._cancel_timer()
        await self._close_transport()
        if self.state is not SessionState.CLOSED:
            self.end_reason = self.end_reason or "cancelled"
            self._enter(SessionState.CLOSED)
        self.logger.info("session_aborted", extra={"details": {"samples": len(self.samples)}})

    async def _close_transport(self) -> None:
        if not self.transport.is_open:
            return
        try:
            await self.transport.close()
        except Exception as exc:
            self.logger.warning("transport_close_failed", extra={"details": {"error": str(exc)}})

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

    def _enter(self, state: SessionState) -> None:
        self.logger.debug("session_state", extra={"details": {"from": self.state.value, "to": state.value}})
        self.state = state
