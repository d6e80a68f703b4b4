"""Tests for the websocket transport against a local server."""
import asyncio
import json
import socket

import pytest
from websockets.asyncio.server import serve

from spalink.session import CollectionSession
from spalink.transports.base import EventKind
from spalink.transports.websocket import WebSocketTransport, build_ws_url, redact_url


def _free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_transport_feeds_a_session(store):
    seen_headers = {}

    async def handler(ws):
        seen_headers["origin"] = ws.request.headers.get("Origin")
        await ws.send(json.dumps({"stsR": 1}))
        for dsp in ("71076f000000", "717f6f0000", "716f6f000000"):
            await ws.send(json.dumps({"dsp": dsp}))
        await ws.wait_closed()

    async def scenario():
        async with serve(handler, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            transport = WebSocketTransport(f"ws://127.0.0.1:{port}", origin="https://example.test")
            session = CollectionSession(transport, store, timeout=5.0)
            return await session.run(), transport

    reading, transport = asyncio.run(scenario())

    assert reading.temperature == 98.0
    assert store.readings == [reading]
    assert not transport.is_open
    assert seen_headers["origin"] == "https://example.test"


def test_server_close_is_reported():
    events = []

    async def handler(ws):
        await ws.close(code=1001, reason="maintenance")

    async def scenario():
        async with serve(handler, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            transport = WebSocketTransport(f"ws://127.0.0.1:{port}")
            await transport.connect(events.append)
            for _ in range(100):
                if events and events[-1].kind is EventKind.CLOSED:
                    break
                await asyncio.sleep(0.01)
            await transport.close()

    asyncio.run(scenario())

    assert events[0].kind is EventKind.OPENED
    assert events[-1].kind is EventKind.CLOSED
    assert events[-1].code == 1001
    assert events[-1].reason == "maintenance"


def test_refused_connection_raises_connection_error():
    transport = WebSocketTransport(f"ws://127.0.0.1:{_free_port()}", open_timeout=2.0)

    with pytest.raises(ConnectionError):
        asyncio.run(transport.connect(lambda event: None))
    assert not transport.is_open


def test_refused_connection_still_yields_reading(store):
    transport = WebSocketTransport(f"ws://127.0.0.1:{_free_port()}", open_timeout=2.0)
    session = CollectionSession(transport, store, timeout=5.0)

    reading = asyncio.run(session.run())

    assert reading.temperature is None
    assert session.end_reason == "error"


def test_stalled_handshake_raises_connection_error():
    async def scenario():
        async def stall(reader, writer):
            await asyncio.sleep(5)
            writer.close()

        server = await asyncio.start_server(stall, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        transport = WebSocketTransport(f"ws://127.0.0.1:{port}", open_timeout=0.2)
        try:
            with pytest.raises(ConnectionError):
                await transport.connect(lambda event: None)
        finally:
            server.close()

    asyncio.run(scenario())


def test_redact_url_masks_token():
    url = build_ws_url("wss://accsmartlink.com/", "secret-token")

    assert redact_url(url) == "wss://accsmartlink.com/spa/***/wsb"


def test_invalid_uri_error_does_not_leak_token():
    transport = WebSocketTransport(build_ws_url("https://accsmartlink.com", "secret-token"))

    with pytest.raises(ConnectionError) as excinfo:
        asyncio.run(transport.connect(lambda event: None))

    assert "secret-token" not in str(excinfo.value)
    assert "/spa/***/wsb" in str(excinfo.value)
