"""Starting price repository."""

import logging
import uuid
from typing import List, Optional

from ..schemas.common import utc_now
from ..schemas.registry import CollectionName
from ..schemas.starting_price import Sport, StartingPrice, UpsertStartingPriceRequest
from .base import CollectionRepository

logger = logging.getLogger(__name__)


class StartingPriceRepository(CollectionRepository[StartingPrice]):
    """Base price tables, one row per sport."""

    collection = CollectionName.STARTING_PRICES
    entity_model = StartingPrice
    resource_type = "starting price"

    async def get_active(self, sport: Sport) -> Optional[StartingPrice]:
        """Active row for ``sport``, or ``None`` to fall back to the default table."""
        return await self.find(lambda row: row.sport == sport and row.is_active)

    async def upsert(self, payload: UpsertStartingPriceRequest) -> StartingPrice:
        """Create or replace the row for ``payload.sport``."""

        def mutation(rows: List[StartingPrice]) -> StartingPrice:
            for index, row in enumerate(rows):
                if row.sport == payload.sport:
                    rows[index] = self.build({
                        **payload.model_dump(),
                        "id": row.id,
                        "updated_at": utc_now(),
                    })
                    return rows[index]

            row = self.build({
                **payload.model_dump(),
                "id": f"price-{uuid.uuid4()}",
                "updated_at": utc_now(),
            })
            rows.append(row)
            return row

        row = await self.mutate(mutation)
        logger.info(
            "Starting price saved",
            extra={"sport": row.sport.value, "is_active": row.is_active}
        )
        return row
