"""Service layer package."""

from .booking_service import BookingService
from .payment_service import PaymentService
from .price_resolution import PriceResolver
from .pricing_service import PricingService, validate_client_price

__all__ = [
    "BookingService",
    "PaymentService",
    "PriceResolver",
    "PricingService",
    "validate_client_price",
]
