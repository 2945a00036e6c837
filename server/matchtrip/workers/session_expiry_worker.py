"""Background worker that purges expired admin sessions."""

import logging
from typing import Callable

from ..core.observability import metrics_collector
from ..repositories.session_repository import SessionRepository
from ..schemas.common import utc_now
from ..store import DocumentStore
from .base import BaseWorker

logger = logging.getLogger(__name__)


class SessionExpiryWorker(BaseWorker):
    """Deletes sessions whose ``expires_at`` has passed and reports the live count."""

    def __init__(self, store_provider: Callable[[], DocumentStore], interval_seconds: float = 300):
        """
        Args:
            store_provider: Returns the store to sweep, resolved on every iteration
            interval_seconds: How often to sweep
        """
        super().__init__(name="SessionExpiry", interval_seconds=interval_seconds)
        self.store_provider = store_provider

    async def process(self) -> None:
        sessions = SessionRepository(self.store_provider())
        now = utc_now()

        removed = await sessions.purge_expired(now)
        remaining = len(await sessions.list())
        metrics_collector.set_active_sessions(remaining)

        if removed:
            logger.info(
                "Expired sessions removed",
                extra={"worker": self.name, "removed": removed, "remaining": remaining}
            )
