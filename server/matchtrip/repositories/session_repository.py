"""Admin session repository."""

import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from ..schemas.auth import Session
from ..schemas.common import utc_now
from ..schemas.registry import CollectionName
from .base import CollectionRepository

logger = logging.getLogger(__name__)


class SessionRepository(CollectionRepository[Session]):
    """Opaque bearer sessions for admins."""

    collection = CollectionName.SESSIONS
    entity_model = Session
    resource_type = "session"

    async def create(
        self,
        admin_id: str,
        ttl_seconds: int,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Session:
        now = utc_now()
        session = self.build({
            "id": f"session-{uuid.uuid4()}",
            "admin_id": admin_id,
            "token": secrets.token_urlsafe(32),
            "created_at": now,
            "expires_at": now + timedelta(seconds=ttl_seconds),
            "last_used_at": now,
            "user_agent": user_agent,
            "ip_address": ip_address,
        })

        def append(sessions: List[Session]) -> Session:
            sessions.append(session)
            return session

        await self.mutate(append)
        logger.info("Session created", extra={"session_id": session.id, "admin_id": admin_id})
        return session

    async def find_by_token(self, token: str) -> Optional[Session]:
        return await self.find(lambda session: secrets.compare_digest(session.token, token))

    async def delete_by_token(self, token: str) -> bool:
        """Remove the session for ``token``; returns whether one existed."""

        def mutation(sessions: List[Session]) -> bool:
            for index, session in enumerate(sessions):
                if secrets.compare_digest(session.token, token):
                    del sessions[index]
                    return True
            return False

        return await self.mutate(mutation)

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete sessions whose ``expires_at`` has passed; returns how many were removed."""
        now = now or utc_now()
        if not any(session.is_expired(now) for session in await self.list()):
            return 0

        def mutation(sessions: List[Session]) -> int:
            live = [session for session in sessions if not session.is_expired(now)]
            removed = len(sessions) - len(live)
            sessions[:] = live
            return removed

        removed = await self.mutate(mutation)
        if removed:
            logger.info("Expired sessions purged", extra={"removed": removed})
        return removed
