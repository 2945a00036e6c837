"""Pricing request and breakdown schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .booking import TripSelection
from .date_override import PriceSource


class PriceCalculationRequest(TripSelection):
    """Request schema for a server-side quote."""


class ValidateClientPriceRequest(TripSelection):
    """Quote a selection and compare it with the total the client displayed."""

    client_price: float = Field(..., ge=0, description="Total shown by the client")
    tolerance: Optional[float] = Field(None, ge=0, description="Accepted absolute difference")


class BreakdownLine(BaseModel):
    """One labelled, non-zero line of a quote."""

    component: str = Field(..., description="package, league_surcharge, extra, league_removal or flight_preference")
    description: str
    amount: float
    quantity: Optional[int] = None
    unit_price: Optional[float] = None


class PriceBreakdown(BaseModel):
    """Server-computed quote."""

    nights: int = Field(..., ge=1, le=4)
    package_cost: float
    league_surcharge: float
    extras_cost: float
    league_removal_cost: float
    flight_preference_cost: float
    total_cost: float
    currency: str
    base_price_source: PriceSource
    breakdown: List[BreakdownLine] = Field(default_factory=list)


class ClientPriceValidation(BaseModel):
    """Comparison of a client total with the server total."""

    is_valid: bool
    difference: float
    server_price: float
    client_price: float
