"""Date override repository."""

import datetime as dt
import logging
import uuid
from typing import List, Optional

from ..core.exceptions import ConflictError
from ..core.pricing_config import base_price_table
from ..schemas.common import utc_now
from ..schemas.date_override import (
    CreateDateOverrideRequest,
    DateOverride,
    DateOverridePatch,
)
from ..schemas.registry import CollectionName
from ..schemas.starting_price import DurationKey
from .base import CollectionRepository
from .starting_price_repository import StartingPriceRepository

logger = logging.getLogger(__name__)


class DuplicateDateOverrideError(ConflictError):
    """Exception when a date and duration already have an enabled override."""

    def __init__(self, date: dt.date, duration: str, existing_id: str):
        super().__init__(
            detail=f"An enabled override already exists for {date.isoformat()} (duration {duration})",
            conflicting_resource={"id": existing_id, "date": date.isoformat(), "duration": duration},
        )
        self.problem_details.update({
            "code": "DUPLICATE_DATE_OVERRIDE",
            "retryable": False,
        })


def _check_unique(overrides: List[DateOverride], candidate: DateOverride) -> None:
    if not candidate.is_enabled:
        return
    for existing in overrides:
        if (
            existing.id != candidate.id
            and existing.is_enabled
            and existing.date == candidate.date
            and existing.duration == candidate.duration
        ):
            raise DuplicateDateOverrideError(candidate.date, candidate.duration, existing.id)


class DateOverrideRepository(CollectionRepository[DateOverride]):
    """Per-date price overrides and reveal details."""

    collection = CollectionName.DATE_OVERRIDES
    entity_model = DateOverride
    resource_type = "date override"

    def __init__(self, store, starting_prices: Optional[StartingPriceRepository] = None):
        super().__init__(store)
        self.starting_prices = starting_prices or StartingPriceRepository(store)

    async def find_for(self, date: dt.date, duration: DurationKey) -> Optional[DateOverride]:
        """Enabled override for (date, duration), if any."""
        return await self.find(
            lambda override: override.is_enabled
            and override.date == date
            and override.duration == duration
        )

    async def create(self, payload: CreateDateOverrideRequest) -> DateOverride:
        """Create an override with a base price snapshot from the current price tables."""
        starting_rows = await self.starting_prices.list()
        now = utc_now()
        override = self.build({
            **payload.model_dump(),
            "id": f"date-{uuid.uuid4()}",
            "base_prices": base_price_table(starting_rows, payload.duration),
            "created_at": now,
            "updated_at": now,
        })

        def append(overrides: List[DateOverride]) -> DateOverride:
            _check_unique(overrides, override)
            overrides.append(override)
            return override

        await self.mutate(append)
        logger.info(
            "Date override created",
            extra={
                "override_id": override.id,
                "date": override.date.isoformat(),
                "duration": override.duration,
                "status": override.status.value,
            }
        )
        return override

    async def update(self, override_id: str, patch: DateOverridePatch) -> DateOverride:
        """Patch an override; re-enabling one that now collides raises ``ConflictError``."""

        def mutation(overrides: List[DateOverride]) -> DateOverride:
            index = self.index_of(overrides, override_id)
            updated = self.merge(overrides[index], patch, updated_at=utc_now())
            _check_unique(overrides, updated)
            overrides[index] = updated
            return updated

        return await self.mutate(mutation)

