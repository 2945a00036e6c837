"""FAQ router."""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.dependencies import AdminSession, get_faq_repository
from ..repositories.faq_repository import FaqRepository
from ..schemas.common import DeleteResponse, EntityIdRequest
from ..schemas.faq import CreateFaqRequest, FaqItem, UpdateFaqRequest

router = APIRouter(prefix="/v1/faq", tags=["faq"])

REPOSITORY_DEPENDENCY = Depends(get_faq_repository)


@router.post("/list", response_model=List[FaqItem])
async def list_faqs(repository: FaqRepository = REPOSITORY_DEPENDENCY) -> JSONResponse:
    items = await repository.list()
    return JSONResponse(status_code=200, content=[item.model_dump() for item in items])


@router.post("/create", response_model=FaqItem, dependencies=[AdminSession])
async def create_faq(
    request: CreateFaqRequest,
    repository: FaqRepository = REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    item = await repository.create(request)
    return JSONResponse(status_code=201, content=item.model_dump())


@router.post("/update", response_model=FaqItem, dependencies=[AdminSession])
async def update_faq(
    request: UpdateFaqRequest,
    repository: FaqRepository = REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    item = await repository.update(request.id, request.to_patch())
    return JSONResponse(status_code=200, content=item.model_dump())


@router.post("/delete", response_model=DeleteResponse, dependencies=[AdminSession])
async def delete_faq(
    request: EntityIdRequest,
    repository: FaqRepository = REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    await repository.delete(request.id)
    return JSONResponse(status_code=200, content=DeleteResponse(id=request.id).model_dump())
