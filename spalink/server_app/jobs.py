import asyncio
import logging
from typing import Dict, List


class JobManager:
    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.tasks: Dict[str, asyncio.Task] = {}

    def start(self, coro, name: str) -> asyncio.Task:
        existing = self.tasks.get(name)
        if existing is not None and not existing.done():
            coro.close()
            raise RuntimeError(f"Job '{name}' is already running")
        task = asyncio.create_task(coro, name=name)
        task.add_done_callback(self._on_done)
        self.tasks[name] = task
        return task

    def running(self) -> List[str]:
        return sorted(name for name, task in self.tasks.items() if not task.done())

    def _on_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.logger.error("job_failed", extra={"details": {"job": task.get_name(), "error": str(exc)}})

    async def stop(self):
        for task in self.tasks.values():
            task.cancel()
        for task in self.tasks.values():
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as exc:
                self.logger.error("job_stop_failed", extra={"details": {"job": task.get_name(), "error": str(exc)}})
        self.tasks.clear()
