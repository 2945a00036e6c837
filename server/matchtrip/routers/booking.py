"""Booking router for booking operations."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.dependencies import AdminSession, get_booking_service
from ..core.exceptions import InternalServerError, ProblemDetailsException
from ..schemas.booking import Booking, BookingList, BookingRef, CreateBookingRequest, UpdateBookingRequest
from ..schemas.common import DeleteResponse, EntityIdRequest
from ..services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/booking", tags=["booking"])

# Define dependencies to avoid B008 linting errors
BOOKING_SERVICE_DEPENDENCY = Depends(get_booking_service)


@router.post("/create", response_model=BookingRef)
async def create_booking(
    request: CreateBookingRequest,
    booking_service: BookingService = BOOKING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """
    Create a booking.

    The total is recalculated server-side; the submitted ``total_cost`` is
    only compared against it.
    """
    try:
        booking_ref = await booking_service.create_booking(request)
    except ProblemDetailsException:
        raise
    except Exception as e:
        logger.error(
            "Unexpected error in booking creation",
            extra={
                "sport": request.selected_sport.value,
                "package": request.selected_package.value,
                "error": str(e),
            },
            exc_info=True
        )
        raise InternalServerError() from e

    return JSONResponse(
        status_code=201,
        content=booking_ref.model_dump(mode="json")
    )


@router.post("/list", response_model=BookingList, dependencies=[AdminSession])
async def list_bookings(
    booking_service: BookingService = BOOKING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """List every booking (admin)."""
    bookings = await booking_service.get_all_bookings()
    response_data = BookingList(bookings=bookings, count=len(bookings))
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/get", response_model=Booking, dependencies=[AdminSession])
async def get_booking(
    request: EntityIdRequest,
    booking_service: BookingService = BOOKING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """Get one booking (admin)."""
    booking = await booking_service.get_booking(request.id)
    return JSONResponse(status_code=200, content=booking.model_dump(mode="json"))


@router.post("/update", response_model=Booking, dependencies=[AdminSession])
async def update_booking(
    request: UpdateBookingRequest,
    booking_service: BookingService = BOOKING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """Patch status, payment status, approval or reveal details (admin)."""
    booking = await booking_service.update_booking(request.id, request.to_patch())
    return JSONResponse(status_code=200, content=booking.model_dump(mode="json"))


@router.post("/delete", response_model=DeleteResponse, dependencies=[AdminSession])
async def delete_booking(
    request: EntityIdRequest,
    booking_service: BookingService = BOOKING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """Delete a booking (admin)."""
    await booking_service.delete_booking(request.id)
    return JSONResponse(status_code=200, content=DeleteResponse(id=request.id).model_dump())
