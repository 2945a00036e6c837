"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import Meta, StrictModel, utc_now
from .starting_price import PackageTier, Sport, normalize_sport

MINUTES_PER_DAY = 1440


class BookingStatus(str, Enum):
    """Booking status enumeration."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment status enumeration."""
    UNPAID = "unpaid"
    PAID = "paid"
    FAILED = "failed"


class ApproveStatus(str, Enum):
    """Admin reveal workflow status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class League(str, Enum):
    """League selection; European leagues carry a flat surcharge."""
    NATIONAL = "national"
    EUROPEAN = "european"


class BookingExtra(StrictModel):
    """Optional add-on as selected in the booking wizard."""

    id: str = Field(..., min_length=1, description="Catalog extra ID")
    name: str = Field("", description="Display name")
    description: str = Field("", description="Display description")
    price: float = Field(0, ge=0, description="Client-displayed unit price; ignored by pricing")
    quantity: int = Field(1, ge=0, description="Selected quantity")
    max_quantity: Optional[int] = Field(None, ge=0, description="Upper bound offered in the wizard")
    is_selected: bool = Field(False, description="Whether the traveller chose this extra")
    is_included: bool = Field(False, description="Included in the package at no cost")
    currency: str = Field("EUR", pattern=r"^[A-Z]{3}$")


class RemovedLeague(StrictModel):
    """A league the traveller excluded from the surprise draw."""

    id: str = Field(..., min_length=1, description="League ID")
    name: str = Field("", description="League display name")
    country: Optional[str] = Field(None, description="League country")


class Traveler(StrictModel):
    """Additional traveller details."""

    name: str = Field(..., min_length=1, max_length=200)
    date_of_birth: Optional[date] = Field(None, description="Date of birth (YYYY-MM-DD)")
    document_number: Optional[str] = Field(None, max_length=64)
    is_primary: bool = Field(False)


class TripSelection(StrictModel):
    """
    Everything the pricing engine reads from a booking.

    Shared by quote requests, booking creation and the stored booking so the
    three can never disagree about what was priced.
    """

    selected_sport: Sport = Field(..., description="football, basketball or combined ('both' accepted)")
    selected_package: PackageTier = Field(..., description="Package tier")
    selected_league: League = Field(League.NATIONAL, description="League selection")
    adults: int = Field(1, ge=0, le=50)
    kids: int = Field(0, ge=0, le=50)
    babies: int = Field(0, ge=0, le=50)
    total_people: Optional[int] = Field(
        None,
        ge=1,
        description="adults + kids + babies; derived when omitted"
    )
    departure_date: date = Field(..., description="Outbound date (YYYY-MM-DD)")
    return_date: date = Field(..., description="Return date (YYYY-MM-DD)")
    departure_time_start: Optional[int] = Field(None, ge=0, le=MINUTES_PER_DAY, description="Minute of day")
    departure_time_end: Optional[int] = Field(None, ge=0, le=MINUTES_PER_DAY, description="Minute of day")
    arrival_time_start: Optional[int] = Field(None, ge=0, le=MINUTES_PER_DAY, description="Minute of day")
    arrival_time_end: Optional[int] = Field(None, ge=0, le=MINUTES_PER_DAY, description="Minute of day")
    removed_leagues_count: int = Field(0, ge=0)
    has_removed_leagues: bool = Field(False)
    booking_extras: List[BookingExtra] = Field(default_factory=list)

    @field_validator("selected_sport", mode="before")
    @classmethod
    def normalize_sport_alias(cls, value):
        return normalize_sport(value)

    @field_validator("selected_league", "selected_package", mode="before")
    @classmethod
    def lowercase(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @model_validator(mode="after")
    def check_people_and_dates(self):
        people = self.adults + self.kids + self.babies
        if self.total_people is None:
            self.total_people = people
        elif self.total_people != people:
            raise ValueError(
                f"total_people ({self.total_people}) must equal adults + kids + babies ({people})"
            )
        if people < 1:
            raise ValueError("at least one traveller is required")
        if self.return_date < self.departure_date:
            raise ValueError("return_date must not be before departure_date")
        return self


class ContactDetails(StrictModel):
    """Lead traveller contact fields."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=254)
    phone: str = Field("", max_length=40)
    previous_travel_info: Optional[str] = Field(None, max_length=2000)
    selected_city: str = Field(..., min_length=1, max_length=100, description="Departure city")
    removed_leagues: List[RemovedLeague] = Field(default_factory=list)
    travelers: List[Traveler] = Field(default_factory=list)


class CreateBookingRequest(TripSelection, ContactDetails):
    """Request schema for creating a booking."""

    total_cost: float = Field(..., ge=0, description="Total shown to the traveller; checked, never trusted")


class Booking(TripSelection, ContactDetails):
    """Persisted booking."""

    id: str = Field(..., pattern=r"^booking-", description="Unique booking ID")
    status: BookingStatus = Field(BookingStatus.PENDING)
    payment_status: PaymentStatus = Field(PaymentStatus.UNPAID)
    approve_status: ApproveStatus = Field(ApproveStatus.PENDING)
    payment_reference: Optional[str] = Field(None, description="Checkout session ID")
    total_cost: float = Field(..., ge=0, description="Server-computed total")
    currency: str = Field("EUR", pattern=r"^[A-Z]{3}$")
    destination_city: Optional[str] = Field(None, description="Revealed destination (admin only)")
    assigned_match: Optional[str] = Field(None, description="Assigned match (admin only)")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    deleted_at: Optional[datetime] = Field(None, description="Legacy field; deletes are hard")


class BookingCollection(BaseModel):
    """Persisted ``bookings`` collection."""

    bookings: List[Booking] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)


class BookingPatch(StrictModel):
    """Admin- and payment-updatable booking fields; unknown fields are rejected."""

    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None
    approve_status: Optional[ApproveStatus] = None
    destination_city: Optional[str] = Field(None, max_length=100)
    assigned_match: Optional[str] = Field(None, max_length=200)
    payment_reference: Optional[str] = Field(None, max_length=255)


class UpdateBookingRequest(BookingPatch):
    """Request schema for patching a booking."""

    id: str = Field(..., min_length=1, description="Booking to update")

    def to_patch(self) -> BookingPatch:
        return BookingPatch(**self.model_dump(exclude={"id"}, exclude_unset=True))


class BookingRef(BaseModel):
    """Checkout-session-shaped projection of a newly created booking."""

    object: str = Field("booking", description="Object type")
    booking_id: str = Field(..., description="Unique booking ID")
    amount_total: int = Field(..., ge=0, description="Server total in minor units (cents)")
    currency: str = Field(..., description="Lower-case ISO 4217 currency code")
    status: BookingStatus
    payment_status: PaymentStatus
    metadata: dict = Field(default_factory=dict, description="Echoed to the payment collaborator")

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingRef":
        return cls(
            booking_id=booking.id,
            amount_total=round(booking.total_cost * 100),
            currency=booking.currency.lower(),
            status=booking.status,
            payment_status=booking.payment_status,
            metadata={"booking_id": booking.id},
        )


class BookingList(BaseModel):
    """List response for bookings."""

    bookings: List[Booking]
    count: int
