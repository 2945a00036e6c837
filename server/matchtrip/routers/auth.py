"""Admin login and logout."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.dependencies import get_admin_repository, get_session_repository, parse_bearer_token
from ..repositories.admin_repository import AdminRepository
from ..repositories.session_repository import SessionRepository
from ..schemas.auth import LoginRequest, LoginResponse, LogoutResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/auth", tags=["auth"])

ADMIN_REPOSITORY_DEPENDENCY = Depends(get_admin_repository)
SESSION_REPOSITORY_DEPENDENCY = Depends(get_session_repository)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    admins: AdminRepository = ADMIN_REPOSITORY_DEPENDENCY,
    sessions: SessionRepository = SESSION_REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    """Exchange admin credentials for an opaque bearer token."""
    admin = await admins.verify_credentials(request.email, request.password)

    session = await sessions.create(
        admin.id,
        ttl_seconds=settings.session_ttl_seconds,
        user_agent=http_request.headers.get("User-Agent"),
        ip_address=http_request.client.host if http_request.client else None,
    )

    logger.info("Admin logged in", extra={"admin_id": admin.id, "session_id": session.id})

    response_data = LoginResponse(access_token=session.token, expires_at=session.expires_at)
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    sessions: SessionRepository = SESSION_REPOSITORY_DEPENDENCY,
) -> JSONResponse:
    """Revoke the bearer token; revoking an unknown token is not an error."""
    token = parse_bearer_token(authorization)
    removed = await sessions.delete_by_token(token)
    logger.info("Admin logged out", extra={"session_found": removed})
    return JSONResponse(status_code=200, content=LogoutResponse().model_dump())
