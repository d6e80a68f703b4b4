from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from spalink.domain.reading import Reading
from spalink.session.collector import (
    SESSION_TIMEOUT_SECONDS,
    TARGET_SAMPLES,
    CollectionSession,
    ReadingSink,
)
from spalink.transports.base import SpaTransport

POLL_INTERVAL_SECONDS = 300.0


class CollectionScheduler:
    """
    Runs one collection session per interval, never two at once.

    The in-flight guard lives here rather than in the session: ``trigger``
    refuses to start while a session task is still running, and after
    ``shutdown`` no session starts at all. Each session gets a fresh
    transport from ``transport_factory``.
    """

    def __init__(
        self,
        transport_factory: Callable[[], SpaTransport],
        storage: ReadingSink,
        interval: float = POLL_INTERVAL_SECONDS,
        target_samples: int = TARGET_SAMPLES,
        session_timeout: float = SESSION_TIMEOUT_SECONDS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.transport_factory = transport_factory
        self.storage = storage
        self.interval = interval
        self.target_samples = target_samples
        self.session_timeout = session_timeout
        self.logger = logger or logging.getLogger("spalink")
        self.last_reading: Optional[Reading] = None
        self._active: Optional[asyncio.Task] = None
        self._shutting_down = False

    @property
    def in_flight(self) -> bool:
        return self._active is not None and not self._active.done()

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    async def trigger(self) -> Optional[Reading]:
        if self._shutting_down:
            self.logger.info("collection_skipped", extra={"details": {"reason": "shutdown"}})
            return None
        if self.in_flight:
            self.logger.info("collection_skipped", extra={"details": {"reason": "in_flight"}})
            return None

        session = CollectionSession(
            transport=self.transport_factory(),
            storage=self.storage,
            target_samples=self.target_samples,
            timeout=self.session_timeout,
            logger=self.logger,
        )
        self._active = asyncio.create_task(session.run(), name="spa-collection")
        try:
            reading = await self._active
        finally:
            self._active = None
        self.last_reading = reading
        return reading

    async def run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set() and not self._shutting_down:
            try:
                await self.trigger()
            except Exception as exc:
                self.logger.error("collection_failed", extra={"details": {"error": str(exc)}})
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                continue

    async def shutdown(self) -> None:
        self._shutting_down = True
        task = self._active
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self.logger.info("collector_shutdown", extra={"details": {}})
