"""Unit tests for the date override and starting price repositories."""

from datetime import date

import pytest

from matchtrip.core.exceptions import ConflictError, NotFoundError
from matchtrip.schemas.date_override import CreateDateOverrideRequest, DateOverridePatch
from matchtrip.schemas.starting_price import PackageTier, Sport, UpsertStartingPriceRequest

FLAT_TABLE = {
    key: {"standard": 100 * int(key), "premium": 1000 * int(key)}
    for key in ("1", "2", "3", "4")
}


@pytest.mark.asyncio
async def test_create_snapshots_default_base_prices(date_override_repository):
    """Test a new override records the default table for its duration."""
    override = await date_override_repository.create(
        CreateDateOverrideRequest(date=date(2025, 6, 1), duration="2")
    )

    assert override.id.startswith("date-")
    assert override.base_prices[Sport.FOOTBALL].standard == 379
    assert override.base_prices[Sport.BASKETBALL].premium == 1479
    assert override.base_prices[Sport.COMBINED].standard == 379 + 359
    assert override.approve_status.value == "pending"


@pytest.mark.asyncio
async def test_create_snapshots_active_starting_price(date_override_repository, starting_price_repository):
    """Test an active StartingPrice row wins over the default table."""
    await starting_price_repository.upsert(
        UpsertStartingPriceRequest(sport="football", prices_by_duration=FLAT_TABLE)
    )

    override = await date_override_repository.create(
        CreateDateOverrideRequest(date=date(2025, 6, 1), duration="3")
    )

    assert override.base_prices[Sport.FOOTBALL].standard == 300
    assert override.base_prices[Sport.BASKETBALL].standard == 439


@pytest.mark.asyncio
async def test_duplicate_enabled_override_conflicts(date_override_repository):
    """Test a second enabled override for the same date and duration."""
    await date_override_repository.create(CreateDateOverrideRequest(date=date(2025, 6, 1)))

    with pytest.raises(ConflictError):
        await date_override_repository.create(CreateDateOverrideRequest(date=date(2025, 6, 1)))

    # Other durations and disabled rows are fine
    await date_override_repository.create(CreateDateOverrideRequest(date=date(2025, 6, 1), duration="2"))
    await date_override_repository.create(
        CreateDateOverrideRequest(date=date(2025, 6, 1), status="disabled")
    )
    assert len(await date_override_repository.list()) == 3


@pytest.mark.asyncio
async def test_find_for_ignores_disabled(date_override_repository):
    """Test lookups only return enabled overrides."""
    disabled = await date_override_repository.create(
        CreateDateOverrideRequest(date=date(2025, 6, 1), status="disabled")
    )
    assert await date_override_repository.find_for(date(2025, 6, 1), "1") is None

    await date_override_repository.update(disabled.id, DateOverridePatch(status="enabled"))
    found = await date_override_repository.find_for(date(2025, 6, 1), "1")
    assert found.id == disabled.id
    assert await date_override_repository.find_for(date(2025, 6, 1), "2") is None


@pytest.mark.asyncio
async def test_reenabling_into_collision_conflicts(date_override_repository):
    """Test enabling a disabled override that collides with an enabled one."""
    await date_override_repository.create(CreateDateOverrideRequest(date=date(2025, 6, 1)))
    disabled = await date_override_repository.create(
        CreateDateOverrideRequest(date=date(2025, 6, 1), status="disabled")
    )

    with pytest.raises(ConflictError):
        await date_override_repository.update(disabled.id, DateOverridePatch(status="enabled"))


@pytest.mark.asyncio
async def test_update_override_prices(date_override_repository):
    """Test patching override prices and reveal details."""
    created = await date_override_repository.create(CreateDateOverrideRequest(date=date(2025, 6, 1)))

    updated = await date_override_repository.update(
        created.id,
        DateOverridePatch(
            override_prices={"football": {"standard": 250}},
            destination_city="Madrid",
            approve_status="approved",
        ),
    )

    assert updated.override_for(Sport.FOOTBALL, PackageTier.STANDARD) == 250
    assert updated.override_for(Sport.FOOTBALL, PackageTier.PREMIUM) is None
    assert updated.override_for(Sport.BASKETBALL, PackageTier.STANDARD) is None
    assert updated.destination_city == "Madrid"
    assert updated.base_prices == created.base_prices


@pytest.mark.asyncio
async def test_delete_override(date_override_repository):
    """Test deleting an override and a missing one."""
    created = await date_override_repository.create(CreateDateOverrideRequest(date=date(2025, 6, 1)))

    await date_override_repository.delete(created.id)
    assert await date_override_repository.list() == []

    with pytest.raises(NotFoundError):
        await date_override_repository.delete(created.id)


@pytest.mark.asyncio
async def test_upsert_starting_price_replaces_row(starting_price_repository):
    """Test upsert keeps one row per sport and preserves its ID."""
    first = await starting_price_repository.upsert(
        UpsertStartingPriceRequest(sport="basketball", prices_by_duration=FLAT_TABLE)
    )
    second = await starting_price_repository.upsert(
        UpsertStartingPriceRequest(sport="basketball", prices_by_duration=FLAT_TABLE, is_active=False)
    )

    assert second.id == first.id
    assert len(await starting_price_repository.list()) == 1
    assert await starting_price_repository.get_active(Sport.BASKETBALL) is None


@pytest.mark.asyncio
async def test_get_active_starting_price(starting_price_repository):
    """Test the active row is returned for its sport only."""
    await starting_price_repository.upsert(
        UpsertStartingPriceRequest(sport="both", prices_by_duration=FLAT_TABLE)
    )

    row = await starting_price_repository.get_active(Sport.COMBINED)
    assert row.prices_by_duration["4"].premium == 4000
    assert await starting_price_repository.get_active(Sport.FOOTBALL) is None
