"""Server-side pricing engine and client price reconciliation."""

import logging
import math
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.config import settings
from ..core.observability import metrics_collector
from ..core.pricing_config import (
    EXTRAS_CATALOG,
    FlightPreference,
    LeagueRemoval,
    LeagueSurcharge,
    Nights,
)
from ..schemas.booking import BookingExtra, TripSelection
from ..schemas.date_override import PriceSource
from ..schemas.pricing import BreakdownLine, ClientPriceValidation, PriceBreakdown
from ..schemas.starting_price import DurationKey
from .price_resolution import PriceResolver

logger = logging.getLogger(__name__)


def compute_nights(departure: date, return_: date) -> int:
    """Whole nights between the dates, clamped to the priced range."""
    days = abs((return_ - departure).total_seconds()) / 86400
    return max(Nights.MIN, min(Nights.MAX, math.ceil(days)))


def duration_key(nights: int) -> DurationKey:
    return str(nights)  # type: ignore[return-value]


def league_surcharge(league: str) -> float:
    return LeagueSurcharge.EUROPEAN if league == LeagueSurcharge.SURCHARGED_LEAGUE else 0.0


def price_extras(extras: Iterable[BookingExtra]) -> Tuple[float, List[BreakdownLine]]:
    """Catalog-priced extras; unknown or included extras cost nothing."""
    lines = []
    for extra in extras:
        if not extra.is_selected or extra.is_included:
            continue
        unit_price = EXTRAS_CATALOG.get(extra.id, 0.0)
        if unit_price <= 0 or extra.quantity <= 0:
            continue
        lines.append(BreakdownLine(
            component="extra",
            description=extra.name or extra.id,
            amount=unit_price * extra.quantity,
            quantity=extra.quantity,
            unit_price=unit_price,
        ))
    return sum(line.amount for line in lines), lines


def league_removal_cost(has_removed: bool, removed_count: int, total_people: int) -> float:
    if not has_removed or removed_count <= 0:
        return 0.0
    chargeable = max(0, removed_count - LeagueRemoval.FREE_REMOVALS)
    return chargeable * LeagueRemoval.COST_PER_REMOVAL_PER_PERSON * total_people


def nearest_slot_index(minute: int, slots: Sequence[int]) -> int:
    """Index of the slot closest to ``minute``; ties go to the earlier slot."""
    return min(range(len(slots)), key=lambda index: abs(slots[index] - minute))


def _leg_steps(
    start: Optional[int],
    end: Optional[int],
    slots: Sequence[int],
    default_window: Tuple[int, int],
) -> int:
    if start is None or end is None:
        return 0
    default_start = nearest_slot_index(default_window[0], slots)
    default_end = nearest_slot_index(default_window[1], slots)
    return (
        abs(nearest_slot_index(start, slots) - default_start)
        + abs(nearest_slot_index(end, slots) - default_end)
    )


def flight_preference_cost(selection: TripSelection) -> float:
    """Each slot step away from the default windows costs a fixed amount."""
    steps = _leg_steps(
        selection.departure_time_start,
        selection.departure_time_end,
        FlightPreference.DEPARTURE_SLOTS,
        FlightPreference.DEFAULT_DEPARTURE_WINDOW,
    ) + _leg_steps(
        selection.arrival_time_start,
        selection.arrival_time_end,
        FlightPreference.ARRIVAL_SLOTS,
        FlightPreference.DEFAULT_ARRIVAL_WINDOW,
    )
    return steps * FlightPreference.COST_PER_STEP


def build_breakdown(
    selection: TripSelection,
    nights: int,
    package_cost: float,
    currency: str,
    base_price_source: PriceSource,
) -> PriceBreakdown:
    """
    Assemble a quote from an already-resolved package price.

    Pure: the same inputs always produce the same breakdown, and the line
    items always add up to ``total_cost``.
    """
    surcharge = league_surcharge(selection.selected_league.value)
    extras_cost, extra_lines = price_extras(selection.booking_extras)
    removal = league_removal_cost(
        selection.has_removed_leagues,
        selection.removed_leagues_count,
        selection.total_people,
    )
    flight = flight_preference_cost(selection)

    lines: List[BreakdownLine] = []
    if package_cost:
        lines.append(BreakdownLine(
            component="package",
            description=(
                f"{selection.selected_sport.value.capitalize()} "
                f"{selection.selected_package.value} package, {nights} night{'s' if nights > 1 else ''}"
            ),
            amount=package_cost,
        ))
    if surcharge:
        lines.append(BreakdownLine(component="league_surcharge", description="European league", amount=surcharge))
    lines.extend(extra_lines)
    if removal:
        lines.append(BreakdownLine(
            component="league_removal",
            description=f"{selection.removed_leagues_count} leagues removed",
            amount=removal,
            quantity=selection.total_people,
        ))
    if flight:
        lines.append(BreakdownLine(component="flight_preference", description="Flight time preferences", amount=flight))

    return PriceBreakdown(
        nights=nights,
        package_cost=package_cost,
        league_surcharge=surcharge,
        extras_cost=extras_cost,
        league_removal_cost=removal,
        flight_preference_cost=flight,
        total_cost=sum(line.amount for line in lines),
        currency=currency,
        base_price_source=base_price_source,
        breakdown=lines,
    )


def validate_client_price(
    server_price: float,
    client_price: float,
    tolerance: float = settings.client_price_tolerance,
) -> ClientPriceValidation:
    """Compare a client total with the server total; never raises."""
    difference = abs(server_price - client_price)
    return ClientPriceValidation(
        is_valid=difference <= tolerance,
        difference=round(difference, 2),
        server_price=server_price,
        client_price=client_price,
    )


class PricingService:
    """Quotes selections against the current price tables and overrides."""

    def __init__(self, resolver: PriceResolver):
        self.resolver = resolver

    async def calculate_price(self, selection: TripSelection) -> PriceBreakdown:
        """
        Price a selection server-side.

        Raises:
            PricingDataMissingError: If no base price exists for the selection
        """
        nights = compute_nights(selection.departure_date, selection.return_date)
        resolved = await self.resolver.effective_price(
            selection.departure_date,
            selection.selected_sport,
            selection.selected_package,
            duration_key(nights),
        )

        breakdown = build_breakdown(selection, nights, resolved.amount, resolved.currency, resolved.source)

        metrics_collector.record_price_calculation(
            selection.selected_sport.value, selection.selected_package.value
        )
        logger.debug(
            "Price calculated",
            extra={
                "sport": selection.selected_sport.value,
                "package": selection.selected_package.value,
                "nights": nights,
                "total_cost": breakdown.total_cost,
                "base_price_source": resolved.source.value,
            }
        )
        return breakdown

    @staticmethod
    def validate_client_price(
        server_price: float,
        client_price: float,
        tolerance: Optional[float] = None,
    ) -> ClientPriceValidation:
        if tolerance is None:
            tolerance = settings.client_price_tolerance
        return validate_client_price(server_price, client_price, tolerance)
