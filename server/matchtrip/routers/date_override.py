"""Date override router: admin price overrides and public price resolution."""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.dependencies import AdminSession, get_date_override_repository, get_price_resolver
from ..repositories.date_override_repository import DateOverrideRepository
from ..schemas.common import DeleteResponse, EntityIdRequest
from ..schemas.date_override import (
    CreateDateOverrideRequest,
    DateOverride,
    ResolvedPrice,
    ResolvePriceRequest,
    UpdateDateOverrideRequest,
)
from ..services.price_resolution import PriceResolver

router = APIRouter(prefix="/v1/date-override", tags=["date-override"])

REPOSITORY_DEPENDENCY = Depends(get_date_override_repository)


@router.post("/list", response_model=List[DateOverride], dependencies=[AdminSession])
async def list_date_overrides(
    repository: DateOverrideRepository = REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    """List overrides ordered by date (admin)."""
    overrides = sorted(await repository.list(), key=lambda override: (override.date, override.duration))
    return JSONResponse(
        status_code=200,
        content=[override.model_dump(mode="json") for override in overrides]
    )


@router.post("/create", response_model=DateOverride, dependencies=[AdminSession])
async def create_date_override(
    request: CreateDateOverrideRequest,
    repository: DateOverrideRepository = REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    """Create an override; the base prices in force are snapshotted onto it (admin)."""
    override = await repository.create(request)
    return JSONResponse(status_code=201, content=override.model_dump(mode="json"))


@router.post("/update", response_model=DateOverride, dependencies=[AdminSession])
async def update_date_override(
    request: UpdateDateOverrideRequest,
    repository: DateOverrideRepository = REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    """Patch an override (admin)."""
    override = await repository.update(request.id, request.to_patch())
    return JSONResponse(status_code=200, content=override.model_dump(mode="json"))


@router.post("/delete", response_model=DeleteResponse, dependencies=[AdminSession])
async def delete_date_override(
    request: EntityIdRequest,
    repository: DateOverrideRepository = REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    """Delete an override (admin)."""
    await repository.delete(request.id)
    return JSONResponse(status_code=200, content=DeleteResponse(id=request.id).model_dump())


@router.post("/resolve", response_model=ResolvedPrice)
async def resolve_price(
    request: ResolvePriceRequest,
    resolver: PriceResolver = Depends(get_price_resolver),
) -> JSONResponse:
    """Effective package price for a date, sport, package and duration."""
    resolved = await resolver.effective_price(request.date, request.sport, request.package, request.duration)
    return JSONResponse(status_code=200, content=resolved.model_dump(mode="json"))
