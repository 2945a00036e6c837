"""Worker manager for coordinating background tasks."""

import asyncio
import logging
from typing import Dict

from ..core.config import settings
from ..core.storage import get_store
from .base import BaseWorker
from .session_expiry_worker import SessionExpiryWorker

logger = logging.getLogger(__name__)


class WorkerManager:
    """Starts and stops the application's background workers together."""

    def __init__(self, workers: Dict[str, BaseWorker] = None):
        self.workers: Dict[str, BaseWorker] = workers if workers is not None else self._default_workers()

    @staticmethod
    def _default_workers() -> Dict[str, BaseWorker]:
        return {
            "session_expiry": SessionExpiryWorker(
                get_store,
                interval_seconds=settings.session_cleanup_interval_seconds,
            ),
        }

    async def start_all(self) -> None:
        for worker in self.workers.values():
            await worker.start()
        logger.info("Workers started", extra={"workers": sorted(self.workers)})

    async def stop_all(self) -> None:
        """Stop all workers; a failure to stop one does not prevent stopping the rest."""
        results = await asyncio.gather(
            *(worker.stop() for worker in self.workers.values()),
            return_exceptions=True,
        )

        for name, result in zip(self.workers, results):
            if isinstance(result, Exception):
                logger.error(
                    "Error stopping worker",
                    extra={"worker": name, "error": str(result)}
                )

        logger.info("Workers stopped")

    def get_worker(self, name: str) -> BaseWorker:
        return self.workers[name]

    def get_worker_status(self) -> Dict[str, bool]:
        return {name: worker.is_running for name, worker in self.workers.items()}


# Global worker manager instance
worker_manager = WorkerManager()
