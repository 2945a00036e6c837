"""Admin and session schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import Meta, StrictModel, utc_now

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class Admin(StrictModel):
    """Administrator account."""

    id: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=254)
    password_hash: str = Field(..., min_length=1, description="pbkdf2_sha256$<iterations>$<salt>$<hash>")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    last_login_at: Optional[datetime] = None
    failed_login_attempts: int = Field(0, ge=0)


class AdminCollection(BaseModel):
    """Persisted ``admins`` collection."""

    admins: List[Admin] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)


class Session(StrictModel):
    """Opaque bearer session issued at login."""

    id: str = Field(..., min_length=1)
    admin_id: str = Field(..., min_length=1)
    token: str = Field(..., min_length=32)
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime
    last_used_at: datetime = Field(default_factory=utc_now)
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class SessionCollection(BaseModel):
    """Persisted ``sessions`` collection."""

    sessions: List[Session] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)


class LoginRequest(StrictModel):
    """Request schema for admin login."""

    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=254)
    password: str = Field(..., min_length=1, max_length=256)


class LoginResponse(BaseModel):
    """Issued session token."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class LogoutResponse(BaseModel):
    """Acknowledgement of a logout."""

    success: bool = True
