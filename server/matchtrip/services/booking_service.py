"""Booking service: server-priced creation and admin/payment updates."""

import logging
from typing import List

from ..core.config import settings
from ..core.exceptions import PriceMismatchError
from ..core.observability import metrics_collector
from ..repositories.booking_repository import BookingRepository
from ..schemas.booking import Booking, BookingPatch, BookingRef, CreateBookingRequest
from .pricing_service import PricingService

logger = logging.getLogger(__name__)


class BookingService:
    """Service for booking-related operations."""

    def __init__(
        self,
        bookings: BookingRepository,
        pricing: PricingService,
        reject_price_mismatch: bool = settings.reject_price_mismatch,
    ):
        self.bookings = bookings
        self.pricing = pricing
        self.reject_price_mismatch = reject_price_mismatch

    async def create_booking(self, request: CreateBookingRequest) -> BookingRef:
        """
        Create a booking priced by the server.

        The submitted ``total_cost`` is only compared with the server quote;
        the stored total is always the server's.

        Raises:
            PriceMismatchError: If the totals disagree and rejection is enabled
            PricingDataMissingError: If the selection cannot be priced
        """
        quote = await self.pricing.calculate_price(request)
        check = self.pricing.validate_client_price(quote.total_cost, request.total_cost)

        if not check.is_valid:
            metrics_collector.record_client_price_mismatch()
            logger.warning(
                "Client total differs from server quote",
                extra={
                    "server_price": check.server_price,
                    "client_price": check.client_price,
                    "difference": check.difference,
                    "rejected": self.reject_price_mismatch,
                }
            )
            if self.reject_price_mismatch:
                raise PriceMismatchError(
                    server_price=check.server_price,
                    client_price=check.client_price,
                    tolerance=settings.client_price_tolerance,
                )

        booking = await self.bookings.create(request, total_cost=quote.total_cost, currency=quote.currency)
        return BookingRef.from_booking(booking)

    async def update_booking(self, booking_id: str, patch: BookingPatch) -> Booking:
        return await self.bookings.update(booking_id, patch)

    async def delete_booking(self, booking_id: str) -> Booking:
        return await self.bookings.delete(booking_id)

    async def get_booking(self, booking_id: str) -> Booking:
        return await self.bookings.get(booking_id)

    async def get_all_bookings(self) -> List[Booking]:
        return await self.bookings.list()
