import argparse
import asyncio
import json
import sys
from typing import Optional

import uvicorn

from spalink.domain.reading import Reading
from spalink.server_app import SpaSettings, create_app, get_settings, websocket_factory
from spalink.server_app.logging import create_logger
from spalink.session.scheduler import CollectionScheduler
from spalink.storage.database import ReadingStore


class SpaMonitor:
    def __init__(self, settings: SpaSettings) -> None:
        self.settings = settings

    def start(self) -> None:
        app = create_app(settings=self.settings)
        uvicorn.run(app, host=self.settings.server_ip, port=self.settings.server_port, log_level="info")

    async def collect_once(self) -> Optional[Reading]:
        logger = create_logger("spalink", self.settings.log_ring_size, self.settings.log_level)
        store = ReadingStore(self.settings.db_path)
        scheduler = CollectionScheduler(
            transport_factory=websocket_factory(self.settings, logger),
            storage=store,
            target_samples=self.settings.target_samples,
            session_timeout=self.settings.session_timeout_seconds,
            logger=logger,
        )
        try:
            return await scheduler.trigger()
        finally:
            await scheduler.shutdown()
            store.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Collect spa readings and serve the dashboard API.")
    parser.add_argument("--ip", type=str, default=None, help="IP address to bind the dashboard server to.")
    parser.add_argument("--port", type=int, default=None, help="Port to run the dashboard server on.")
    parser.add_argument("--db", type=str, default=None, help="Path of the SQLite readings database.")
    parser.add_argument("--once", action="store_true", help="Run a single collection, print the reading and exit.")
    args = parser.parse_args(argv)

    overrides = {}
    if args.ip is not None:
        overrides["server_ip"] = args.ip
    if args.port is not None:
        overrides["server_port"] = args.port
    if args.db is not None:
        overrides["db_path"] = args.db
    settings = get_settings().model_copy(update=overrides)

    if not settings.spa_token:
        print("Error: SPA_TOKEN not found in environment. Create a .env file with SPA_TOKEN=your_token", file=sys.stderr)
        return 1

    monitor = SpaMonitor(settings)
    if args.once:
        reading = asyncio.run(monitor.collect_once())
        print(json.dumps(reading.as_dict() if reading else None, indent=2))
        return 0

    monitor.start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
