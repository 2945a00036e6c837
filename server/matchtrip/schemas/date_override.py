"""Date/price override schemas."""

import datetime as dt
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .booking import ApproveStatus, League
from .common import Meta, StrictModel, utc_now
from .starting_price import DurationKey, DurationPrice, PackageTier, Sport, normalize_sport


class DateStatus(str, Enum):
    """Whether an override participates in price resolution."""
    ENABLED = "enabled"
    DISABLED = "disabled"


class OverridePrice(BaseModel):
    """Replacement prices for one sport; ``None`` keeps the base price."""

    standard: Optional[float] = Field(None, ge=0)
    premium: Optional[float] = Field(None, ge=0)

    def price_for(self, package: PackageTier) -> Optional[float]:
        return self.standard if package == PackageTier.STANDARD else self.premium


class DateOverride(StrictModel):
    """Per-date, per-duration price override and reveal details."""

    id: str = Field(..., min_length=1, description="Unique override ID")
    date: dt.date = Field(..., description="Calendar date (YYYY-MM-DD)")
    status: DateStatus = Field(DateStatus.ENABLED)
    duration: DurationKey = Field("1", description="Night count this override applies to")
    league: League = Field(League.NATIONAL)
    notes: Optional[str] = Field(None, max_length=2000)
    base_prices: Dict[Sport, DurationPrice] = Field(
        ...,
        description="Base prices at creation time, for display next to overrides"
    )
    override_prices: Dict[Sport, OverridePrice] = Field(default_factory=dict)
    approve_status: ApproveStatus = Field(ApproveStatus.PENDING)
    destination_city: Optional[str] = Field(None, max_length=100)
    assigned_match: Optional[str] = Field(None, max_length=200)
    created_at: dt.datetime = Field(default_factory=utc_now)
    updated_at: dt.datetime = Field(default_factory=utc_now)
    deleted_at: Optional[dt.datetime] = Field(None, description="Legacy field; deletes are hard")

    @property
    def is_enabled(self) -> bool:
        return self.status == DateStatus.ENABLED

    def override_for(self, sport: Sport, package: PackageTier) -> Optional[float]:
        """Override price for a sport/package, or ``None`` when not overridden."""
        prices = self.override_prices.get(sport)
        return prices.price_for(package) if prices else None


class DateOverrideCollection(BaseModel):
    """Persisted ``date-overrides`` collection."""

    date_overrides: List[DateOverride] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)

    @model_validator(mode="after")
    def one_enabled_override_per_slot(self) -> "DateOverrideCollection":
        seen = set()
        for override in self.date_overrides:
            if not override.is_enabled:
                continue
            key = (override.date, override.duration)
            if key in seen:
                raise ValueError(
                    f"more than one enabled override for {override.date.isoformat()} "
                    f"(duration {override.duration})"
                )
            seen.add(key)
        return self


class CreateDateOverrideRequest(StrictModel):
    """Request schema for creating a date override."""

    date: dt.date = Field(..., description="Calendar date (YYYY-MM-DD)")
    status: DateStatus = Field(DateStatus.ENABLED)
    duration: DurationKey = Field("1")
    league: League = Field(League.NATIONAL)
    notes: Optional[str] = Field(None, max_length=2000)
    override_prices: Dict[Sport, OverridePrice] = Field(default_factory=dict)
    destination_city: Optional[str] = Field(None, max_length=100)
    assigned_match: Optional[str] = Field(None, max_length=200)


class DateOverridePatch(StrictModel):
    """Updatable date override fields."""

    status: Optional[DateStatus] = None
    league: Optional[League] = None
    notes: Optional[str] = Field(None, max_length=2000)
    override_prices: Optional[Dict[Sport, OverridePrice]] = None
    approve_status: Optional[ApproveStatus] = None
    destination_city: Optional[str] = Field(None, max_length=100)
    assigned_match: Optional[str] = Field(None, max_length=200)


class UpdateDateOverrideRequest(DateOverridePatch):
    """Request schema for patching a date override."""

    id: str = Field(..., min_length=1)

    def to_patch(self) -> DateOverridePatch:
        return DateOverridePatch(**self.model_dump(exclude={"id"}, exclude_unset=True))


class ResolvePriceRequest(StrictModel):
    """Request schema for resolving the effective package price on a date."""

    date: dt.date
    sport: Sport
    package: PackageTier
    duration: DurationKey = Field("1")

    @field_validator("sport", mode="before")
    @classmethod
    def normalize_sport_alias(cls, value):
        return normalize_sport(value)


class PriceSource(str, Enum):
    """Where an effective price came from."""
    DATE_OVERRIDE = "date_override"
    STARTING_PRICE = "starting_price"
    DEFAULT = "default"


class ResolvedPrice(BaseModel):
    """Effective package price and its source."""

    amount: float = Field(..., ge=0)
    currency: str
    source: PriceSource
    override_id: Optional[str] = None
