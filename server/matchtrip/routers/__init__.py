"""FastAPI routers package."""

from .auth import router as auth_router
from .booking import router as booking_router
from .date_override import router as date_override_router
from .faq import router as faq_router
from .health import router as health_router
from .metrics import router as metrics_router
from .pricing import router as pricing_router
from .starting_price import router as starting_price_router
from .webhooks import router as webhooks_router

__all__ = [
    "auth_router",
    "booking_router",
    "date_override_router",
    "faq_router",
    "health_router",
    "metrics_router",
    "pricing_router",
    "starting_price_router",
    "webhooks_router",
]
