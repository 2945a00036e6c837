"""Integration tests for API endpoints."""

import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


async def _create_booking(test_client, payload):
    response = await test_client.post("/v1/booking/create", json=payload)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_booking_endpoint(test_client, sample_booking_data):
    """Test the booking creation endpoint."""
    data = await _create_booking(test_client, sample_booking_data)

    assert data["object"] == "booking"
    assert data["booking_id"].startswith("booking-")
    assert data["amount_total"] == 37900
    assert data["currency"] == "eur"
    assert data["status"] == "pending"
    assert data["payment_status"] == "unpaid"


@pytest.mark.asyncio
async def test_create_booking_invalid_data(test_client, sample_booking_data):
    """Test booking creation with a missing email."""
    payload = {key: value for key, value in sample_booking_data.items() if key != "email"}

    response = await test_client.post("/v1/booking/create", json=payload)

    assert response.status_code == 422
    data = response.json()
    assert data["status"] == 422
    assert "body.email" in [violation["path"] for violation in data["violations"]]


@pytest.mark.asyncio
async def test_create_booking_rejects_server_fields(test_client, sample_booking_data):
    """Test clients cannot set status on creation."""
    response = await test_client.post(
        "/v1/booking/create",
        json={**sample_booking_data, "status": "confirmed"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_admin_routes_require_token(test_client):
    """Test admin routes without authentication."""
    response = await test_client.post("/v1/booking/list")

    assert response.status_code == 401
    data = response.json()
    assert data["status"] == 401
    assert "authentication" in data["title"].lower()
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_admin_routes_reject_unknown_token(test_client):
    response = await test_client.post(
        "/v1/faq/create",
        json={"question": "Q?", "answer": "A."},
        headers={"Authorization": "Bearer " + "x" * 43},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_and_logout(test_client, admin):
    """Test exchanging credentials for a token and revoking it."""
    response = await test_client.post(
        "/v1/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    headers = {"Authorization": f"Bearer {data['access_token']}"}

    response = await test_client.post("/v1/booking/list", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"bookings": [], "count": 0}

    response = await test_client.post("/v1/auth/logout", headers=headers)
    assert response.status_code == 200

    response = await test_client.post("/v1/booking/list", headers=headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_wrong_password(test_client, admin):
    response = await test_client.post(
        "/v1/auth/login",
        json={"email": ADMIN_EMAIL, "password": "nope"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_booking_admin_flow(test_client, admin_headers, sample_booking_data):
    """Test get, update and delete through the admin API."""
    created = await _create_booking(test_client, sample_booking_data)
    booking_id = created["booking_id"]

    response = await test_client.post("/v1/booking/get", json={"id": booking_id}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["total_cost"] == 379

    response = await test_client.post(
        "/v1/booking/update",
        json={"id": booking_id, "status": "confirmed", "destination_city": "Lisbon"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"
    assert response.json()["destination_city"] == "Lisbon"

    response = await test_client.post(
        "/v1/booking/update",
        json={"id": booking_id, "total_cost": 1},
        headers=admin_headers,
    )
    assert response.status_code == 422

    response = await test_client.post("/v1/booking/delete", json={"id": booking_id}, headers=admin_headers)
    assert response.json() == {"id": booking_id, "deleted": True}

    response = await test_client.post("/v1/booking/get", json={"id": booking_id}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["status"] == 404


@pytest.mark.asyncio
async def test_pricing_calculate_endpoint(test_client, sample_trip):
    """Test the quote endpoint returns a full breakdown."""
    response = await test_client.post(
        "/v1/pricing/calculate",
        json={**sample_trip, "selected_league": "european"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["nights"] == 2
    assert data["total_cost"] == 429
    assert data["base_price_source"] == "default"
    assert {line["component"] for line in data["breakdown"]} == {"package", "league_surcharge"}


@pytest.mark.asyncio
async def test_pricing_validate_endpoint(test_client, sample_trip):
    response = await test_client.post(
        "/v1/pricing/validate",
        json={**sample_trip, "client_price": 390},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["is_valid"] is False
    assert data["difference"] == 11
    assert data["server_price"] == 379


@pytest.mark.asyncio
async def test_date_override_flow(test_client, admin_headers, sample_trip):
    """Test an override created through the API changes public quotes."""
    response = await test_client.post(
        "/v1/date-override/create",
        json={
            "date": "2025-03-01",
            "duration": "2",
            "override_prices": {"football": {"standard": 300}},
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    override = response.json()
    assert override["base_prices"]["football"]["standard"] == 379

    response = await test_client.post(
        "/v1/date-override/resolve",
        json={"date": "2025-03-01", "sport": "football", "package": "standard", "duration": "2"},
    )
    assert response.json()["amount"] == 300
    assert response.json()["override_id"] == override["id"]

    response = await test_client.post("/v1/pricing/calculate", json=sample_trip)
    assert response.json()["total_cost"] == 300

    response = await test_client.post(
        "/v1/date-override/create",
        json={"date": "2025-03-01", "duration": "2"},
        headers=admin_headers,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_DATE_OVERRIDE"

    response = await test_client.post(
        "/v1/date-override/update",
        json={"id": override["id"], "status": "disabled"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    response = await test_client.post("/v1/pricing/calculate", json=sample_trip)
    assert response.json()["total_cost"] == 379


@pytest.mark.asyncio
async def test_starting_price_endpoints(test_client, admin_headers):
    """Test upserting a price table and reading it back publicly."""
    payload = {
        "sport": "basketball",
        "prices_by_duration": {key: {"standard": 100, "premium": 200} for key in ("1", "2", "3", "4")},
    }

    response = await test_client.post("/v1/starting-price/upsert", json=payload)
    assert response.status_code == 401

    response = await test_client.post("/v1/starting-price/upsert", json=payload, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["id"].startswith("price-")

    response = await test_client.post("/v1/starting-price/list")
    assert [row["sport"] for row in response.json()] == ["basketball"]

    incomplete = {**payload, "prices_by_duration": {"1": {"standard": 1, "premium": 2}}}
    response = await test_client.post("/v1/starting-price/upsert", json=incomplete, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_faq_endpoints(test_client, admin_headers):
    """Test FAQ creation is admin-only and listing is public."""
    response = await test_client.post(
        "/v1/faq/create",
        json={"question": "Where am I going?", "answer": "You find out a week before."},
        headers=admin_headers,
    )
    assert response.status_code == 201
    faq_id = response.json()["id"]

    response = await test_client.post("/v1/faq/list")
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [faq_id]

    response = await test_client.post("/v1/faq/delete", json={"id": faq_id}, headers=admin_headers)
    assert response.status_code == 200

    response = await test_client.post("/v1/faq/delete", json={"id": faq_id}, headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_payment_webhook(test_client, admin_headers, sample_booking_data):
    """Test a completed checkout marks the booking paid."""
    created = await _create_booking(test_client, sample_booking_data)

    response = await test_client.post(
        "/v1/webhooks/payment",
        json={
            "id": "evt_1",
            "type": "checkout.session.completed",
            "data": {"object": {"id": "cs_test_1", "metadata": {"booking_id": created["booking_id"]}}},
        },
    )
    assert response.status_code == 200
    assert response.json() == {"received": True, "handled": True, "booking_id": created["booking_id"]}

    response = await test_client.post(
        "/v1/booking/get", json={"id": created["booking_id"]}, headers=admin_headers
    )
    booking = response.json()
    assert booking["status"] == "completed"
    assert booking["payment_status"] == "paid"
    assert booking["payment_reference"] == "cs_test_1"


@pytest.mark.asyncio
async def test_payment_webhook_unknown_booking(test_client):
    response = await test_client.post(
        "/v1/webhooks/payment",
        json={"type": "checkout.session.completed", "data": {"object": {"client_reference_id": "booking-x"}}},
    )
    assert response.status_code == 200
    assert response.json()["handled"] is False
