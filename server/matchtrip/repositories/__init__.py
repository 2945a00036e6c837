"""Repositories: one per collection, built on the document store."""

from .admin_repository import AdminRepository
from .base import CollectionRepository
from .booking_repository import BookingRepository
from .date_override_repository import DateOverrideRepository, DuplicateDateOverrideError
from .faq_repository import FaqRepository
from .session_repository import SessionRepository
from .starting_price_repository import StartingPriceRepository

__all__ = [
    "AdminRepository",
    "BookingRepository",
    "CollectionRepository",
    "DateOverrideRepository",
    "DuplicateDateOverrideError",
    "FaqRepository",
    "SessionRepository",
    "StartingPriceRepository",
]
