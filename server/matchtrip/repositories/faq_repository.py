"""FAQ repository."""

import uuid
from typing import List

from ..schemas.faq import CreateFaqRequest, FaqItem, FaqPatch
from ..schemas.registry import CollectionName
from .base import CollectionRepository


class FaqRepository(CollectionRepository[FaqItem]):
    """FAQ collection."""

    collection = CollectionName.FAQS
    entity_model = FaqItem
    resource_type = "faq"

    async def list(self) -> List[FaqItem]:
        """FAQs in ascending ``sort_order``; ties keep insertion order."""
        return sorted(await super().list(), key=lambda item: item.sort_order)

    async def create(self, payload: CreateFaqRequest) -> FaqItem:
        def append(items: List[FaqItem]) -> FaqItem:
            sort_order = payload.sort_order
            if sort_order is None:
                sort_order = max((item.sort_order for item in items), default=0) + 1
            item = self.build({
                "id": f"faq-{uuid.uuid4()}",
                "question": payload.question,
                "answer": payload.answer,
                "sort_order": sort_order,
            })
            items.append(item)
            return item

        return await self.mutate(append)

    async def update(self, faq_id: str, patch: FaqPatch) -> FaqItem:
        return await self.replace(faq_id, lambda item: self.merge(item, patch))
