"""Starting price router."""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.dependencies import AdminSession, get_starting_price_repository
from ..repositories.starting_price_repository import StartingPriceRepository
from ..schemas.starting_price import StartingPrice, UpsertStartingPriceRequest

router = APIRouter(prefix="/v1/starting-price", tags=["starting-price"])

REPOSITORY_DEPENDENCY = Depends(get_starting_price_repository)


@router.post("/list", response_model=List[StartingPrice])
async def list_starting_prices(
    repository: StartingPriceRepository = REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    """List the stored base price tables."""
    rows = await repository.list()
    return JSONResponse(status_code=200, content=[row.model_dump(mode="json") for row in rows])


@router.post("/upsert", response_model=StartingPrice, dependencies=[AdminSession])
async def upsert_starting_price(
    request: UpsertStartingPriceRequest,
    repository: StartingPriceRepository = REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    """Create or replace the price table for one sport (admin)."""
    row = await repository.upsert(request)
    return JSONResponse(status_code=200, content=row.model_dump(mode="json"))
