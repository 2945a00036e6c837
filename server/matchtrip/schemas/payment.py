"""Payment collaborator event schemas."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class CheckoutSession(BaseModel):
    """The subset of a checkout session the webhook reads."""

    id: Optional[str] = None
    client_reference_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PaymentEventData(BaseModel):
    object: CheckoutSession = Field(default_factory=CheckoutSession)


class PaymentEvent(BaseModel):
    """Webhook event envelope; unknown fields are ignored."""

    id: Optional[str] = None
    type: str = Field(..., min_length=1)
    data: PaymentEventData = Field(default_factory=PaymentEventData)

    @property
    def session_id(self) -> Optional[str]:
        return self.data.object.id

    @property
    def booking_id(self) -> Optional[str]:
        session = self.data.object
        return session.metadata.get("booking_id") or session.client_reference_id


class PaymentEventResult(BaseModel):
    received: bool = True
    handled: bool
    booking_id: Optional[str] = None
