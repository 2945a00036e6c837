"""Booking repository."""

import logging
import uuid
from typing import List

from ..core.observability import metrics_collector
from ..schemas.booking import (
    ApproveStatus,
    Booking,
    BookingPatch,
    BookingStatus,
    CreateBookingRequest,
    PaymentStatus,
)
from ..schemas.common import utc_now
from ..schemas.registry import CollectionName
from .base import CollectionRepository

logger = logging.getLogger(__name__)


def new_booking_id() -> str:
    return f"booking-{uuid.uuid4()}"


class BookingRepository(CollectionRepository[Booking]):
    """Bookings collection."""

    collection = CollectionName.BOOKINGS
    entity_model = Booking
    resource_type = "booking"

    async def create(self, payload: CreateBookingRequest, total_cost: float, currency: str) -> Booking:
        """
        Append a new booking in its initial state.

        Args:
            payload: Validated creation request
            total_cost: Server-computed total stored on the booking
            currency: Currency of ``total_cost``

        Returns:
            The persisted booking
        """
        now = utc_now()
        data = payload.model_dump(exclude={"total_cost"})
        data.update(
            id=new_booking_id(),
            status=BookingStatus.PENDING,
            payment_status=PaymentStatus.UNPAID,
            approve_status=ApproveStatus.PENDING,
            total_cost=total_cost,
            currency=currency,
            created_at=now,
            updated_at=now,
        )
        booking = self.build(data)

        def append(bookings: List[Booking]) -> Booking:
            bookings.append(booking)
            return booking

        await self.mutate(append)

        metrics_collector.record_booking_created(
            booking.selected_sport.value, booking.selected_package.value
        )
        logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "sport": booking.selected_sport.value,
                "package": booking.selected_package.value,
                "total_cost": booking.total_cost,
            }
        )
        return booking

    async def update(self, booking_id: str, patch: BookingPatch) -> Booking:
        """Shallow-merge ``patch`` into a booking; ``NotFoundError`` if absent."""
        changes = patch.model_dump(exclude_unset=True)

        updated = await self.replace(
            booking_id,
            lambda booking: self.merge(booking, patch, updated_at=utc_now()),
        )

        for field in ("status", "payment_status", "approve_status"):
            if changes.get(field) is not None:
                metrics_collector.record_booking_transition(field, getattr(updated, field).value)

        logger.info(
            "Booking updated",
            extra={"booking_id": booking_id, "fields": sorted(changes)}
        )
        return updated
