"""Tests for the dashboard API."""
import json
import time

import pytest
from fastapi.testclient import TestClient

from spalink.domain import Reading
from spalink.domain.reading import now_ms
from spalink.server_app import SpaSettings, create_app, websocket_factory
from spalink.storage import ReadingStore
from spalink.transports.websocket import WebSocketTransport, build_ws_url


@pytest.fixture
def settings(tmp_path):
    return SpaSettings(
        spa_token="secret-token",
        db_path=str(tmp_path / "spa.db"),
        enable_collector_job=False,
    )


@pytest.fixture
def reading_store(settings):
    store = ReadingStore(settings.db_path)
    yield store
    store.close()


def test_current_empty_returns_404(settings, reading_store):
    app = create_app(settings=settings, storage=reading_store)
    with TestClient(app) as client:
        resp = client.get("/api/current")
    assert resp.status_code == 404
    assert resp.json() == {"error": "No readings available"}


def test_current_uses_camel_case(settings, reading_store):
    reading_store.insert_reading(Reading(timestamp=1_000, temperature=101.0, light_on=True, jets2_hi=True))
    app = create_app(settings=settings, storage=reading_store)
    with TestClient(app) as client:
        body = client.get("/api/current").json()
    assert body["timestamp"] == 1_000
    assert body["temperature"] == 101.0
    assert body["lightOn"] is True
    assert body["jets2Hi"] is True
    assert body["auxLo"] is False


def test_readings_invalid_range(settings, reading_store):
    app = create_app(settings=settings, storage=reading_store)
    with TestClient(app) as client:
        resp = client.get("/api/readings", params={"range": "1y"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid range. Use: 1h, 24h, 7d, 30d"}


def test_readings_default_range(settings, reading_store):
    reading_store.insert_reading(Reading(timestamp=now_ms() - 1_000, temperature=98.0))
    app = create_app(settings=settings, storage=reading_store)
    with TestClient(app) as client:
        resp = client.get("/api/readings")
    assert resp.status_code == 200
    assert [r["temperature"] for r in resp.json()] == [98.0]


def test_health_and_logs(settings, reading_store):
    app = create_app(settings=settings, storage=reading_store)
    with TestClient(app) as client:
        health = client.get("/health").json()
        logs = client.get("/api/logs")
    assert health == {
        "status": "ok",
        "collector_running": False,
        "collection_in_flight": False,
        "last_reading_at": None,
    }
    assert logs.status_code == 200
    assert "events" in logs.json()


def test_websocket_factory_requires_token(tmp_path):
    with pytest.raises(ValueError):
        websocket_factory(SpaSettings(spa_token=None, db_path=str(tmp_path / "x.db")), logger=None)


def test_websocket_factory_builds_fresh_transports(settings):
    factory = websocket_factory(settings, logger=None)
    first, second = factory(), factory()
    assert isinstance(first, WebSocketTransport)
    assert first is not second
    assert first.url == "wss://accsmartlink.com/spa/secret-token/wsb"
    assert not first.is_open


def test_build_ws_url_strips_slash():
    assert build_ws_url("wss://example.test/", "abc") == "wss://example.test/spa/abc/wsb"


def test_lifespan_runs_collector(settings, reading_store, make_transport):
    messages = [json.dumps({"dsp": dsp}) for dsp in ("71076f000000", "717f6f000000", "716f6f000000")]
    settings = settings.model_copy(update={"enable_collector_job": True, "poll_interval_seconds": 60.0})
    app = create_app(settings=settings, storage=reading_store, transport_factory=lambda: make_transport(messages))

    with TestClient(app) as client:
        for _ in range(100):
            if reading_store.get_latest_reading() is not None:
                break
            time.sleep(0.02)
        health = client.get("/health").json()

    latest = reading_store.get_latest_reading()
    assert latest is not None
    assert latest.temperature == 98.0
    assert health["collector_running"] is True
    assert app.state.scheduler.shutting_down
