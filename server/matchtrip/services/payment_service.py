"""Applies payment collaborator events to bookings."""

import logging
from typing import Optional

from ..core.exceptions import NotFoundError
from ..schemas.booking import Booking, BookingPatch, BookingStatus, PaymentStatus
from ..schemas.payment import PaymentEvent, PaymentEventResult
from .booking_service import BookingService

logger = logging.getLogger(__name__)

EVENT_PATCHES = {
    "checkout.session.completed": {
        "status": BookingStatus.COMPLETED,
        "payment_status": PaymentStatus.PAID,
    },
    "checkout.session.async_payment_succeeded": {
        "payment_status": PaymentStatus.PAID,
    },
    "checkout.session.async_payment_failed": {
        "payment_status": PaymentStatus.FAILED,
    },
}


class PaymentService:
    """Maps checkout events onto booking updates."""

    def __init__(self, bookings: BookingService):
        self.bookings = bookings

    async def handle_event(self, event: PaymentEvent) -> PaymentEventResult:
        """
        Apply one event.

        Unhandled event types and bookings that no longer exist are
        acknowledged without error so the collaborator stops retrying.
        """
        changes = EVENT_PATCHES.get(event.type)
        if changes is None:
            logger.info("Ignoring payment event", extra={"event_type": event.type})
            return PaymentEventResult(received=True, handled=False)

        booking_id = event.booking_id
        if not booking_id:
            logger.warning(
                "Payment event without booking reference",
                extra={"event_type": event.type, "session_id": event.session_id}
            )
            return PaymentEventResult(received=True, handled=False)

        booking: Optional[Booking] = None
        try:
            booking = await self.bookings.update_booking(booking_id, BookingPatch(**changes))
            if event.session_id and booking.payment_reference != event.session_id:
                # The status patch carries only its own fields
                booking = await self.bookings.update_booking(
                    booking_id, BookingPatch(payment_reference=event.session_id)
                )
        except NotFoundError:
            logger.warning(
                "Payment event for unknown booking",
                extra={"event_type": event.type, "booking_id": booking_id}
            )
            return PaymentEventResult(received=True, handled=False, booking_id=booking_id)

        logger.info(
            "Payment event applied",
            extra={
                "event_type": event.type,
                "booking_id": booking.id,
                "status": booking.status.value,
                "payment_status": booking.payment_status.value,
            }
        )
        return PaymentEventResult(received=True, handled=True, booking_id=booking.id)
