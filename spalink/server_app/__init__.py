"""
FastAPI application serving stored spa readings.

The app's lifespan owns the collection scheduler: it starts the periodic
collector job on startup and, on shutdown, stops new sessions, cancels the
one in flight (timer and transport included) and closes the store.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Callable, List, Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from spalink.server_app.config import SpaSettings, get_settings
from spalink.server_app.jobs import JobManager
from spalink.server_app.logging import create_logger, ring_handler
from spalink.server_app.models import ErrorResponse, HealthResponse, LogEventsResponse, ReadingResponse
from spalink.session.scheduler import CollectionScheduler
from spalink.storage.database import RANGE_MILLIS, ReadingStore
from spalink.transports.base import SpaTransport
from spalink.transports.websocket import WebSocketTransport, build_ws_url


def websocket_factory(settings: SpaSettings, logger) -> Callable[[], SpaTransport]:
    if not settings.spa_token:
        raise ValueError("SPA_TOKEN not found in environment. Create a .env file with SPA_TOKEN=your_token")
    url = build_ws_url(settings.ws_base_url, settings.spa_token)

    def factory() -> SpaTransport:
        return WebSocketTransport(
            url=url,
            origin=settings.ws_origin,
            user_agent=settings.ws_user_agent,
            open_timeout=settings.ws_open_timeout,
            logger=logger,
        )

    return factory


def create_app(
    settings: Optional[SpaSettings] = None,
    storage: Optional[ReadingStore] = None,
    transport_factory: Optional[Callable[[], SpaTransport]] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logger = create_logger("spalink", settings.log_ring_size, settings.log_level)
    owns_storage = storage is None
    store = storage or ReadingStore(settings.db_path)

    if transport_factory is None and settings.enable_collector_job:
        transport_factory = websocket_factory(settings, logger)

    scheduler = CollectionScheduler(
        transport_factory=transport_factory,
        storage=store,
        interval=settings.poll_interval_seconds,
        target_samples=settings.target_samples,
        session_timeout=settings.session_timeout_seconds,
        logger=logger,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        jobs = JobManager(logger)
        stop_event = asyncio.Event()
        app.state.jobs = jobs
        if settings.enable_collector_job:
            jobs.start(scheduler.run(stop_event), name="collector")
            logger.info("collector_started", extra={"details": {"interval": settings.poll_interval_seconds}})
        try:
            yield
        finally:
            await scheduler.shutdown()
            stop_event.set()
            await jobs.stop()
            if owns_storage:
                store.close()
            logger.info("server_stopped", extra={"details": {}})

    app = FastAPI(title="spalink", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = store
    app.state.scheduler = scheduler
    app.state.logger = logger
    app.state.jobs = None

    @app.get("/api/readings", response_model=List[ReadingResponse], responses={400: {"model": ErrorResponse}})
    def get_readings(range_name: str = Query("24h", alias="range")):
        if range_name not in RANGE_MILLIS:
            valid = ", ".join(RANGE_MILLIS)
            return JSONResponse(status_code=400, content={"error": f"Invalid range. Use: {valid}"})
        return [ReadingResponse.from_reading(r) for r in store.get_readings_for_range(range_name)]

    @app.get("/api/current", response_model=ReadingResponse, responses={404: {"model": ErrorResponse}})
    def get_current():
        latest = store.get_latest_reading()
        if latest is None:
            return JSONResponse(status_code=404, content={"error": "No readings available"})
        return ReadingResponse.from_reading(latest)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        jobs = app.state.jobs
        last = scheduler.last_reading
        return HealthResponse(
            collector_running=bool(jobs and "collector" in jobs.running()),
            collection_in_flight=scheduler.in_flight,
            last_reading_at=last.timestamp if last else None,
        )

    @app.get("/api/logs", response_model=LogEventsResponse)
    def get_logs() -> LogEventsResponse:
        handler = ring_handler(logger)
        return LogEventsResponse(events=handler.get_events() if handler else [])

    return app


__all__ = ["SpaSettings", "create_app", "get_settings", "websocket_factory"]
