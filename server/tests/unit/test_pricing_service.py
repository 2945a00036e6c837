"""Unit tests for the pricing engine and price resolution."""

from datetime import date

import pytest

from matchtrip.core.exceptions import PricingDataMissingError
from matchtrip.schemas.booking import TripSelection
from matchtrip.schemas.date_override import CreateDateOverrideRequest, PriceSource
from matchtrip.schemas.starting_price import PackageTier, Sport, UpsertStartingPriceRequest
from matchtrip.services.pricing_service import (
    compute_nights,
    flight_preference_cost,
    league_removal_cost,
    nearest_slot_index,
    price_extras,
    validate_client_price,
)


def _selection(sample_trip, **overrides) -> TripSelection:
    return TripSelection(**{**sample_trip, **overrides})


class TestNights:
    """Tests for night counting."""

    def test_same_day_is_one_night(self):
        assert compute_nights(date(2025, 3, 1), date(2025, 3, 1)) == 1

    def test_long_trips_are_capped(self):
        assert compute_nights(date(2025, 1, 1), date(2025, 1, 10)) == 4

    def test_regular_trip(self):
        assert compute_nights(date(2025, 3, 1), date(2025, 3, 4)) == 3


class TestLineItems:
    """Tests for the individual price components."""

    def test_league_removal_first_is_free(self):
        assert league_removal_cost(True, 1, 4) == 0
        assert league_removal_cost(True, 2, 3) == 60
        assert league_removal_cost(False, 5, 3) == 0

    def test_extras_use_catalog_prices(self, sample_trip):
        selection = _selection(sample_trip, booking_extras=[
            {"id": "breakfast", "name": "Breakfast", "is_selected": True, "quantity": 2},
            {"id": "extra-luggage", "name": "Extra luggage", "price": 1, "is_selected": True, "quantity": 1},
            {"id": "underseat-bag", "name": "Bag", "is_selected": True, "quantity": 2},
            {"id": "seats-together", "name": "Seats", "is_selected": False, "quantity": 1},
            {"id": "mystery", "name": "Unknown", "price": 999, "is_selected": True, "quantity": 1},
        ])

        total, lines = price_extras(selection.booking_extras)

        assert total == 2 * 10 + 40
        assert [line.description for line in lines] == ["Breakfast", "Extra luggage"]

    def test_nearest_slot_ties_go_to_earlier_slot(self):
        # 510 is equidistant from 360 and 660
        assert nearest_slot_index(510, (360, 660, 840)) == 0
        assert nearest_slot_index(700, (360, 660, 840)) == 1

    def test_default_flight_windows_cost_nothing(self, sample_trip):
        selection = _selection(
            sample_trip,
            departure_time_start=360,
            departure_time_end=840,
            arrival_time_start=840,
            arrival_time_end=1440,
        )
        assert flight_preference_cost(selection) == 0

    def test_shifted_departure_window(self, sample_trip):
        selection = _selection(sample_trip, departure_time_start=660, departure_time_end=1080)
        assert flight_preference_cost(selection) == 40

    def test_half_specified_leg_costs_nothing(self, sample_trip):
        selection = _selection(sample_trip, departure_time_start=1440)
        assert flight_preference_cost(selection) == 0


class TestClientPriceValidation:
    """Tests for client total reconciliation."""

    def test_within_tolerance(self):
        result = validate_client_price(500, 504, tolerance=5)
        assert result.is_valid
        assert result.difference == 4

    def test_outside_tolerance(self):
        result = validate_client_price(500, 510, tolerance=5)
        assert not result.is_valid
        assert result.difference == 10

    def test_boundary_is_inclusive(self):
        assert validate_client_price(100, 95, tolerance=5).is_valid

    def test_tolerance_uses_exact_difference(self):
        # 5.004 rounds to 5.0 for display but is still over the tolerance
        result = validate_client_price(500, 505.004, tolerance=5)
        assert not result.is_valid
        assert result.difference == 5.0


@pytest.mark.asyncio
async def test_default_table_quote(pricing_service, sample_trip):
    """Test two adults, football standard, two nights from the default table."""
    quote = await pricing_service.calculate_price(_selection(sample_trip))

    assert quote.nights == 2
    assert quote.package_cost == 379
    assert quote.total_cost == 379
    assert quote.base_price_source == PriceSource.DEFAULT
    assert quote.currency == "EUR"


@pytest.mark.asyncio
async def test_european_league_and_extras(pricing_service, sample_trip):
    """Test surcharge, extras and removals add up in the breakdown."""
    selection = _selection(
        sample_trip,
        selected_league="european",
        has_removed_leagues=True,
        removed_leagues_count=3,
        booking_extras=[{"id": "travel-insurance", "name": "Insurance", "is_selected": True, "quantity": 2}],
    )

    quote = await pricing_service.calculate_price(selection)

    assert quote.league_surcharge == 50
    assert quote.extras_cost == 40
    assert quote.league_removal_cost == 2 * 20 * 2
    assert quote.total_cost == 379 + 50 + 40 + 80
    assert sum(line.amount for line in quote.breakdown) == quote.total_cost


@pytest.mark.asyncio
async def test_starting_price_row_wins_over_defaults(pricing_service, starting_price_repository, sample_trip):
    """Test an active StartingPrice row supplies the base price."""
    await starting_price_repository.upsert(UpsertStartingPriceRequest(
        sport="football",
        prices_by_duration={key: {"standard": 200, "premium": 900} for key in ("1", "2", "3", "4")},
    ))

    quote = await pricing_service.calculate_price(_selection(sample_trip))

    assert quote.package_cost == 200
    assert quote.base_price_source == PriceSource.STARTING_PRICE


@pytest.mark.asyncio
async def test_enabled_override_wins(pricing_service, date_override_repository, sample_trip):
    """Test an enabled override for the departure date and night count."""
    override = await date_override_repository.create(CreateDateOverrideRequest(
        date=date(2025, 3, 1),
        duration="2",
        override_prices={"football": {"standard": 249}},
    ))

    quote = await pricing_service.calculate_price(_selection(sample_trip))
    assert quote.package_cost == 249
    assert quote.base_price_source == PriceSource.DATE_OVERRIDE

    resolved = await pricing_service.resolver.effective_price(
        date(2025, 3, 1), Sport.FOOTBALL, PackageTier.STANDARD, "2"
    )
    assert resolved.override_id == override.id


@pytest.mark.asyncio
async def test_null_override_falls_back_to_base(pricing_service, date_override_repository, sample_trip):
    """Test an override without a value for the package keeps the base price."""
    await date_override_repository.create(CreateDateOverrideRequest(
        date=date(2025, 3, 1),
        duration="2",
        override_prices={"football": {"premium": 999}},
    ))

    quote = await pricing_service.calculate_price(_selection(sample_trip))
    assert quote.package_cost == 379
    assert quote.base_price_source == PriceSource.DEFAULT


@pytest.mark.asyncio
async def test_disabled_override_is_ignored(pricing_service, date_override_repository, sample_trip):
    """Test disabled overrides never apply."""
    await date_override_repository.create(CreateDateOverrideRequest(
        date=date(2025, 3, 1),
        duration="2",
        status="disabled",
        override_prices={"football": {"standard": 1}},
    ))

    quote = await pricing_service.calculate_price(_selection(sample_trip))
    assert quote.package_cost == 379


@pytest.mark.asyncio
async def test_missing_pricing_data(pricing_service, sample_trip, monkeypatch):
    """Test a selection with no base price anywhere."""
    monkeypatch.setattr(
        "matchtrip.services.price_resolution.default_base_price",
        lambda sport, package, duration: None,
    )

    with pytest.raises(PricingDataMissingError):
        await pricing_service.calculate_price(_selection(sample_trip))


@pytest.mark.asyncio
async def test_override_applies_without_base_data(pricing_service, date_override_repository, sample_trip, monkeypatch):
    """Test an enabled override value is used even when no base price exists."""
    await date_override_repository.create(CreateDateOverrideRequest(
        date=date(2025, 3, 1),
        duration="2",
        override_prices={"football": {"standard": 310}},
    ))
    monkeypatch.setattr(
        "matchtrip.services.price_resolution.default_base_price",
        lambda sport, package, duration: None,
    )

    quote = await pricing_service.calculate_price(_selection(sample_trip))

    assert quote.package_cost == 310
    assert quote.base_price_source == PriceSource.DATE_OVERRIDE
    assert quote.currency == "EUR"


@pytest.mark.asyncio
async def test_combined_sport_alias(pricing_service, sample_trip):
    """Test 'both' prices as the combined table."""
    quote = await pricing_service.calculate_price(
        _selection(sample_trip, selected_sport="both", selected_package="premium")
    )
    assert quote.package_cost == 1499 + 1479
