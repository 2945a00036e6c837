"""FastAPI dependencies for storage, repositories, services and admin authentication."""

import logging
from typing import Optional

from fastapi import Depends, Header

from ..repositories import (
    AdminRepository,
    BookingRepository,
    DateOverrideRepository,
    FaqRepository,
    SessionRepository,
    StartingPriceRepository,
)
from ..schemas.auth import Session
from ..schemas.common import utc_now
from ..services import BookingService, PaymentService, PriceResolver, PricingService
from ..store import DocumentStore
from .exceptions import AuthenticationError
from .storage import get_store

logger = logging.getLogger(__name__)

StoreDependency = Depends(get_store)


def get_booking_repository(store: DocumentStore = StoreDependency) -> BookingRepository:
    return BookingRepository(store)


def get_starting_price_repository(store: DocumentStore = StoreDependency) -> StartingPriceRepository:
    return StartingPriceRepository(store)


def get_date_override_repository(store: DocumentStore = StoreDependency) -> DateOverrideRepository:
    return DateOverrideRepository(store)


def get_faq_repository(store: DocumentStore = StoreDependency) -> FaqRepository:
    return FaqRepository(store)


def get_admin_repository(store: DocumentStore = StoreDependency) -> AdminRepository:
    return AdminRepository(store)


def get_session_repository(store: DocumentStore = StoreDependency) -> SessionRepository:
    return SessionRepository(store)


def get_price_resolver(
    starting_prices: StartingPriceRepository = Depends(get_starting_price_repository),
    date_overrides: DateOverrideRepository = Depends(get_date_override_repository),
) -> PriceResolver:
    return PriceResolver(starting_prices, date_overrides)


def get_pricing_service(resolver: PriceResolver = Depends(get_price_resolver)) -> PricingService:
    return PricingService(resolver)


def get_booking_service(
    bookings: BookingRepository = Depends(get_booking_repository),
    pricing: PricingService = Depends(get_pricing_service),
) -> BookingService:
    return BookingService(bookings, pricing)


def get_payment_service(
    bookings: BookingService = Depends(get_booking_service),
) -> PaymentService:
    return PaymentService(bookings)


def parse_bearer_token(authorization: Optional[str]) -> str:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: If the header is missing or malformed
    """
    if not authorization:
        raise AuthenticationError(detail="Authorization header missing")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise AuthenticationError(detail="Invalid authorization header format")

    if scheme.lower() != "bearer":
        raise AuthenticationError(detail="Invalid authentication scheme")

    return token


async def require_admin(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    sessions: SessionRepository = Depends(get_session_repository),
) -> Session:
    """
    Authentication dependency for admin routes.

    Returns:
        Session: The live session for the bearer token

    Raises:
        AuthenticationError: If the token is missing, unknown or expired
    """
    token = parse_bearer_token(authorization)

    session = await sessions.find_by_token(token)
    if session is None:
        raise AuthenticationError(detail="Invalid or revoked session token")

    if session.is_expired(utc_now()):
        await sessions.delete_by_token(token)
        logger.info("Expired session rejected", extra={"session_id": session.id})
        raise AuthenticationError(detail="Session has expired")

    return session


AdminSession = Depends(require_admin)
