"""Pricing router: server-side quotes and client total checks."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.dependencies import get_pricing_service
from ..schemas.pricing import (
    ClientPriceValidation,
    PriceBreakdown,
    PriceCalculationRequest,
    ValidateClientPriceRequest,
)
from ..services.pricing_service import PricingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/pricing", tags=["pricing"])

PRICING_SERVICE_DEPENDENCY = Depends(get_pricing_service)


@router.post("/calculate", response_model=PriceBreakdown)
async def calculate_price(
    request: PriceCalculationRequest,
    pricing_service: PricingService = PRICING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """Quote a selection with a line-item breakdown."""
    breakdown = await pricing_service.calculate_price(request)
    return JSONResponse(status_code=200, content=breakdown.model_dump(mode="json"))


@router.post("/validate", response_model=ClientPriceValidation)
async def validate_price(
    request: ValidateClientPriceRequest,
    pricing_service: PricingService = PRICING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """Quote a selection and compare it with the client's displayed total."""
    breakdown = await pricing_service.calculate_price(request)
    result = pricing_service.validate_client_price(
        breakdown.total_cost, request.client_price, request.tolerance
    )

    if not result.is_valid:
        logger.info(
            "Client price outside tolerance",
            extra={"server_price": result.server_price, "client_price": result.client_price}
        )

    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))
