"""Background workers for the booking core."""

from .base import BaseWorker
from .session_expiry_worker import SessionExpiryWorker

__all__ = ["BaseWorker", "SessionExpiryWorker"]
