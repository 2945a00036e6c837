"""Base worker class for periodic background tasks."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)


class BaseWorker(ABC):
    """
    Abstract base class for background workers.

    Runs ``process`` every ``interval_seconds`` on the event loop. A failed
    iteration is logged and the loop carries on at the next interval.
    """

    def __init__(self, name: str, interval_seconds: float = 60):
        """
        Initialize the worker.

        Args:
            name: Worker name for logging
            interval_seconds: Time between the starts of two iterations
        """
        self.name = name
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @abstractmethod
    async def process(self) -> None:
        """Process one iteration of the background task."""

    async def run_once(self) -> bool:
        """Run one iteration; returns False if it raised."""
        started = time.monotonic()
        try:
            await self.process()
        except Exception:
            logger.error(
                "Worker iteration failed",
                exc_info=True,
                extra={"worker": self.name}
            )
            return False

        logger.debug(
            "Worker iteration completed",
            extra={"worker": self.name, "duration_seconds": time.monotonic() - started}
        )
        return True

    async def start(self) -> None:
        """Start the worker loop."""
        if self.is_running:
            logger.warning("Worker is already running", extra={"worker": self.name})
            return

        self._task = asyncio.create_task(self._run(), name=f"worker:{self.name}")
        logger.info(
            "Worker started",
            extra={"worker": self.name, "interval_seconds": self.interval_seconds}
        )

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if not self.is_running:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Worker stopped", extra={"worker": self.name})

    async def _run(self) -> None:
        while True:
            started = time.monotonic()
            await self.run_once()
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0, self.interval_seconds - elapsed))
