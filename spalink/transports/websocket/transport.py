from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI
from websockets.protocol import State

from spalink.transports.base import EventSink, SpaTransport, TransportEvent

DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
DEFAULT_ORIGIN = "https://accsmartlink.com"


def build_ws_url(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/spa/{token}/wsb"


def redact_url(url: str) -> str:
    return re.sub(r"/spa/[^/]+/", "/spa/***/", url)


class WebSocketTransport(SpaTransport):
    def __init__(
        self,
        url: str,
        origin: str = DEFAULT_ORIGIN,
        user_agent: str = DEFAULT_USER_AGENT,
        open_timeout: float = 10.0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.url = url
        self.origin = origin
        self.user_agent = user_agent
        self.open_timeout = open_timeout
        self.logger = logger or logging.getLogger(__name__)
        self._ws: Optional[ClientConnection] = None
        self._reader: Optional[asyncio.Task] = None

    @property
    def is_open(self) -> bool:
        return self._ws is not None and self._ws.state is State.OPEN

    async def connect(self, sink: EventSink) -> None:
        if self._ws is not None:
            raise RuntimeError("WebSocketTransport instances are single use")
        try:
            self._ws = await connect(
                self.url,
                additional_headers={"Origin": self.origin},
                user_agent_header=self.user_agent,
                open_timeout=self.open_timeout,
            )
        except (OSError, TimeoutError, asyncio.TimeoutError, InvalidHandshake, InvalidURI) as exc:
            detail = str(exc).replace(self.url, redact_url(self.url))
            raise ConnectionError(f"Could not open spa websocket: {detail}") from exc

        sink(TransportEvent.opened())
        self._reader = asyncio.create_task(self._read(self._ws, sink), name="spa-ws-reader")

    async def _read(self, ws: ClientConnection, sink: EventSink) -> None:
        try:
            async for message in ws:
                sink(TransportEvent.message(message))
        except ConnectionClosed as exc:
            frame = exc.rcvd
            sink(TransportEvent.closed(frame.code if frame else None, frame.reason if frame else ""))
            return
        except Exception as exc:
            self.logger.warning("ws_reader_failed", extra={"details": {"error": str(exc)}})
            sink(TransportEvent.failed(exc))
            return
        sink(TransportEvent.closed(ws.close_code, ws.close_reason or ""))

    async def close(self) -> None:
        if self._ws is not None:
            await self._ws.close()
        if self._reader is not None and not self._reader.done():
            try:
                await asyncio.wait_for(self._reader, timeout=self.open_timeout)
            except asyncio.TimeoutError:
                self._reader.cancel()
