"""Admin account repository."""

import base64
import hashlib
import hmac
import logging
import secrets
import uuid
from typing import List, Optional

from ..core.exceptions import AuthenticationError, ConflictError
from ..schemas.auth import Admin
from ..schemas.common import utc_now
from ..schemas.registry import CollectionName
from .base import CollectionRepository

logger = logging.getLogger(__name__)

HASH_ALGORITHM = "pbkdf2_sha256"
HASH_ITERATIONS = 600_000


def hash_password(password: str, iterations: int = HASH_ITERATIONS) -> str:
    """Salted PBKDF2-SHA256 hash encoded as ``algorithm$iterations$salt$hash``."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return "$".join([
        HASH_ALGORITHM,
        str(iterations),
        base64.b64encode(salt).decode("ascii"),
        base64.b64encode(digest).decode("ascii"),
    ])


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt, expected = encoded.split("$")
        if algorithm != HASH_ALGORITHM:
            return False
        digest = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), base64.b64decode(salt), int(iterations)
        )
    except ValueError:
        return False
    return hmac.compare_digest(digest, base64.b64decode(expected))


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AdminRepository(CollectionRepository[Admin]):
    """Administrator accounts."""

    collection = CollectionName.ADMINS
    entity_model = Admin
    resource_type = "admin"

    async def get_by_email(self, email: str) -> Optional[Admin]:
        email = _normalize_email(email)
        return await self.find(lambda admin: admin.email == email)

    async def create_admin(self, email: str, password: str, iterations: int = HASH_ITERATIONS) -> Admin:
        """Create an admin; ``ConflictError`` if the email is taken."""
        email = _normalize_email(email)
        admin = self.build({
            "id": f"admin-{uuid.uuid4()}",
            "email": email,
            "password_hash": hash_password(password, iterations),
        })

        def append(admins: List[Admin]) -> Admin:
            if any(existing.email == email for existing in admins):
                raise ConflictError(detail=f"An admin with email '{email}' already exists")
            admins.append(admin)
            return admin

        await self.mutate(append)
        logger.info("Admin created", extra={"admin_id": admin.id})
        return admin

    async def verify_credentials(self, email: str, password: str) -> Admin:
        """
        Check a login attempt.

        Records ``last_login_at`` on success and bumps the failed-login counter
        otherwise. Unknown emails and wrong passwords raise the same
        ``AuthenticationError``.
        """
        admin = await self.get_by_email(email)
        if admin is None:
            logger.warning("Login attempt for unknown admin")
            raise AuthenticationError(detail="Invalid email or password")

        valid = verify_password(password, admin.password_hash)

        def record(current: Admin) -> Admin:
            if valid:
                changes = {"last_login_at": utc_now(), "failed_login_attempts": 0}
            else:
                changes = {"failed_login_attempts": current.failed_login_attempts + 1}
            return self.build({**current.model_dump(), **changes, "updated_at": utc_now()})

        updated = await self.replace(admin.id, record)

        if not valid:
            logger.warning(
                "Failed admin login",
                extra={"admin_id": admin.id, "failed_login_attempts": updated.failed_login_attempts}
            )
            raise AuthenticationError(detail="Invalid email or password")

        return updated
