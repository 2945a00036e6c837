"""Pricing constants and the single source of base package prices."""

from typing import Dict, Final, Iterable, Mapping, Optional, Tuple

from ..schemas.starting_price import (
    DURATION_KEYS,
    DurationKey,
    DurationPrice,
    PackageTier,
    Sport,
    StartingPrice,
)


class Nights:
    """Bounds applied to the trip length before pricing."""

    MIN: Final[int] = 1
    MAX: Final[int] = 4


class LeagueSurcharge:
    """Flat surcharge per booking, not per person."""

    EUROPEAN: Final[float] = 50.0
    SURCHARGED_LEAGUE: Final[str] = "european"


class LeagueRemoval:
    """Excluding leagues from the draw: the first removal is free."""

    FREE_REMOVALS: Final[int] = 1
    COST_PER_REMOVAL_PER_PERSON: Final[float] = 20.0


class FlightPreference:
    """Slot tables (minutes of day) for flight time-window pricing."""

    COST_PER_STEP: Final[float] = 20.0
    DEPARTURE_SLOTS: Final[Tuple[int, ...]] = (360, 660, 840, 1080, 1440)
    ARRIVAL_SLOTS: Final[Tuple[int, ...]] = (660, 840, 1140, 1440)
    DEFAULT_DEPARTURE_WINDOW: Final[Tuple[int, int]] = (360, 840)
    DEFAULT_ARRIVAL_WINDOW: Final[Tuple[int, int]] = (840, 1440)


# Unit prices for extras; client-submitted prices are never used
EXTRAS_CATALOG: Final[Mapping[str, float]] = {
    "breakfast": 10.0,
    "travel-insurance": 20.0,
    "underseat-bag": 0.0,
    "extra-luggage": 40.0,
    "seats-together": 20.0,
}


def _table(rows: Dict[DurationKey, Tuple[float, float]]) -> Dict[DurationKey, DurationPrice]:
    return {
        key: DurationPrice(standard=standard, premium=premium)
        for key, (standard, premium) in rows.items()
    }


_FOOTBALL = _table({
    "1": (299, 1299),
    "2": (379, 1499),
    "3": (459, 1699),
    "4": (529, 1899),
})

_BASKETBALL = _table({
    "1": (279, 1279),
    "2": (359, 1479),
    "3": (439, 1679),
    "4": (509, 1859),
})

# Combined trips cover one football and one basketball match
_COMBINED = {
    key: DurationPrice(
        standard=_FOOTBALL[key].standard + _BASKETBALL[key].standard,
        premium=_FOOTBALL[key].premium + _BASKETBALL[key].premium,
    )
    for key in DURATION_KEYS
}

DEFAULT_BASE_PRICES: Final[Mapping[Sport, Mapping[DurationKey, DurationPrice]]] = {
    Sport.FOOTBALL: _FOOTBALL,
    Sport.BASKETBALL: _BASKETBALL,
    Sport.COMBINED: _COMBINED,
}


def default_base_price(sport: Sport, package: PackageTier, duration: DurationKey) -> Optional[float]:
    """Static fallback price, or ``None`` if the table has no entry."""
    prices = DEFAULT_BASE_PRICES.get(sport, {}).get(duration)
    return prices.price_for(package) if prices else None


def base_price_table(rows: Iterable[StartingPrice], duration: DurationKey) -> Dict[Sport, DurationPrice]:
    """
    Base prices for every sport at ``duration``.

    Active StartingPrice rows win; sports without one use the static table.
    Used both for price resolution and for the snapshot stored on a new
    date override.
    """
    active = {row.sport: row for row in rows if row.is_active}
    table = {}
    for sport in Sport:
        row = active.get(sport)
        if row is not None and duration in row.prices_by_duration:
            table[sport] = row.prices_by_duration[duration]
        elif duration in DEFAULT_BASE_PRICES.get(sport, {}):
            table[sport] = DEFAULT_BASE_PRICES[sport][duration]
    return table
