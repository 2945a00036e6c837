"""Payment collaborator webhook."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.dependencies import get_payment_service
from ..schemas.payment import PaymentEvent, PaymentEventResult
from ..services.payment_service import PaymentService

router = APIRouter(prefix="/v1/webhooks", tags=["webhooks"])


@router.post("/payment", response_model=PaymentEventResult)
async def payment_webhook(
    event: PaymentEvent,
    payment_service: PaymentService = Depends(get_payment_service),
) -> JSONResponse:
    """
    Apply a checkout event to its booking.

    Signature verification happens in front of this service.
    """
    result = await payment_service.handle_event(event)
    return JSONResponse(status_code=200, content=result.model_dump())
