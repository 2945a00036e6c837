"""Test configuration and fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from matchtrip.core.storage import get_store, init_collections
from matchtrip.repositories import (
    AdminRepository,
    BookingRepository,
    DateOverrideRepository,
    FaqRepository,
    SessionRepository,
    StartingPriceRepository,
)
from matchtrip.services import BookingService, PaymentService, PriceResolver, PricingService
from matchtrip.store import JsonFileStore

# Low iteration count keeps password hashing fast in tests
TEST_HASH_ITERATIONS = 1_000

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def store(data_dir) -> JsonFileStore:
    """A store over an empty temp directory with a short retry interval."""
    return JsonFileStore(data_dir, retry_delay_seconds=0.002, max_retries=5000)


@pytest_asyncio.fixture
async def initialized_store(store) -> JsonFileStore:
    """A store with every collection created empty."""
    await init_collections(store)
    return store


@pytest.fixture
def booking_repository(initialized_store) -> BookingRepository:
    return BookingRepository(initialized_store)


@pytest.fixture
def starting_price_repository(initialized_store) -> StartingPriceRepository:
    return StartingPriceRepository(initialized_store)


@pytest.fixture
def date_override_repository(initialized_store) -> DateOverrideRepository:
    return DateOverrideRepository(initialized_store)


@pytest.fixture
def faq_repository(initialized_store) -> FaqRepository:
    return FaqRepository(initialized_store)


@pytest.fixture
def admin_repository(initialized_store) -> AdminRepository:
    return AdminRepository(initialized_store)


@pytest.fixture
def session_repository(initialized_store) -> SessionRepository:
    return SessionRepository(initialized_store)


@pytest.fixture
def pricing_service(starting_price_repository, date_override_repository) -> PricingService:
    return PricingService(PriceResolver(starting_price_repository, date_override_repository))


@pytest.fixture
def booking_service(booking_repository, pricing_service) -> BookingService:
    return BookingService(booking_repository, pricing_service, reject_price_mismatch=False)


@pytest.fixture
def payment_service(booking_service) -> PaymentService:
    return PaymentService(booking_service)


@pytest_asyncio.fixture
async def test_app(initialized_store):
    """The real application with its store pointed at the temp directory."""
    from matchtrip.main import create_app

    app = create_app()
    app.dependency_overrides[get_store] = lambda: initialized_store

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def admin(admin_repository):
    return await admin_repository.create_admin(ADMIN_EMAIL, ADMIN_PASSWORD, iterations=TEST_HASH_ITERATIONS)


@pytest_asyncio.fixture
async def admin_headers(admin, session_repository):
    """Authorization header for a live admin session."""
    session = await session_repository.create(admin.id, ttl_seconds=3600)
    return {"Authorization": f"Bearer {session.token}"}


@pytest.fixture
def sample_trip():
    """Two adults, football standard, national league, two nights, no extras."""
    return {
        "selected_sport": "football",
        "selected_package": "standard",
        "selected_league": "national",
        "adults": 2,
        "kids": 0,
        "babies": 0,
        "departure_date": "2025-03-01",
        "return_date": "2025-03-03",
    }


@pytest.fixture
def sample_booking_data(sample_trip):
    """Booking creation payload whose total matches the server quote (2 nights = 379)."""
    return {
        **sample_trip,
        "selected_city": "Amsterdam",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone": "+31 20 123 4567",
        "total_cost": 379,
    }
