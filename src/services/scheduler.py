"""Scheduler for background tasks (booking expiration)."""

import asyncio
from typing import Awaitable, Callable

from src.logging import get_logger

logger = get_logger(__name__)


class SchedulerService:
    """Runs a periodic job until stopped."""

    def __init__(
        self,
        job: Callable[[], Awaitable[dict[str, int]]],
        interval_seconds: int = 60,
    ):
        """
        Initialize scheduler service.

        Args:
            job: Coroutine function executed every interval (one DB session per run)
            interval_seconds: Pause between runs
        """
        self.job = job
        self.interval_seconds = interval_seconds
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start scheduler loop."""
        self._running = True
        logger.info("scheduler_started", interval_seconds=self.interval_seconds)

        while self._running:
            await self.tick()
            await asyncio.sleep(self.interval_seconds)

    async def tick(self) -> None:
        """Run the job once; failures are logged and the loop keeps going."""
        try:
            await self.job()
        except Exception as e:
            logger.error("scheduler_job_failed", error=str(e), exc_info=True)

    async def stop(self) -> None:
        """Stop scheduler loop."""
        self._running = False
        logger.info("scheduler_stopped")
