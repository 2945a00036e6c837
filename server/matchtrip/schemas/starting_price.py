"""Starting price (base price table) schemas."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import Meta, StrictModel, utc_now

DurationKey = Literal["1", "2", "3", "4"]
DURATION_KEYS: tuple[DurationKey, ...] = ("1", "2", "3", "4")


class Sport(str, Enum):
    """Sport selection; ``combined`` covers football and basketball together."""
    FOOTBALL = "football"
    BASKETBALL = "basketball"
    COMBINED = "combined"


class PackageTier(str, Enum):
    """Package tier enumeration."""
    STANDARD = "standard"
    PREMIUM = "premium"


def normalize_sport(value):
    """Accept the wizard's ``both`` alias and any casing for a sport."""
    if isinstance(value, str):
        value = value.strip().lower()
        if value == "both":
            return Sport.COMBINED.value
    return value


def require_all_durations(value: Dict[str, "DurationPrice"]) -> Dict[str, "DurationPrice"]:
    missing = [key for key in DURATION_KEYS if key not in value]
    if missing:
        raise ValueError(f"prices_by_duration is missing night counts: {', '.join(missing)}")
    return value


class DurationPrice(BaseModel):
    """Standard and premium price for one night-count."""

    standard: float = Field(..., ge=0, description="Standard package price")
    premium: float = Field(..., ge=0, description="Premium package price")

    def price_for(self, package: PackageTier) -> float:
        return self.standard if package == PackageTier.STANDARD else self.premium


class StartingPriceFields(StrictModel):
    """Fields shared by the stored row and the upsert request."""

    sport: Sport = Field(..., description="Sport this table prices")
    currency: str = Field("EUR", pattern=r"^[A-Z]{3}$", description="ISO 4217 currency code")
    standard_description: str = Field("", max_length=500, description="Standard package description")
    premium_description: str = Field("", max_length=500, description="Premium package description")
    prices_by_duration: Dict[DurationKey, DurationPrice] = Field(
        ...,
        description="Prices keyed by night count '1'..'4'"
    )
    is_active: bool = Field(True, description="Inactive rows fall back to the default table")

    @field_validator("sport", mode="before")
    @classmethod
    def normalize_sport_alias(cls, value):
        return normalize_sport(value)

    @field_validator("prices_by_duration")
    @classmethod
    def check_durations(cls, value):
        return require_all_durations(value)


class StartingPrice(StartingPriceFields):
    """Base price table for one sport."""

    id: str = Field(..., min_length=1, description="Unique starting price ID")
    updated_at: datetime = Field(default_factory=utc_now, description="Last change (ISO 8601)")


class StartingPriceCollection(BaseModel):
    """Persisted ``starting-prices`` collection."""

    starting_prices: List[StartingPrice] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)

    @model_validator(mode="after")
    def one_row_per_sport(self) -> "StartingPriceCollection":
        seen = set()
        for row in self.starting_prices:
            if row.sport in seen:
                raise ValueError(f"duplicate starting price for sport '{row.sport.value}'")
            seen.add(row.sport)
        return self


class UpsertStartingPriceRequest(StartingPriceFields):
    """Request schema for creating or replacing a sport's price table."""


class GetStartingPriceRequest(StrictModel):
    """Request schema for reading one sport's table."""

    sport: Sport = Field(..., description="Sport to read")

    @field_validator("sport", mode="before")
    @classmethod
    def normalize_sport_alias(cls, value):
        return normalize_sport(value)
