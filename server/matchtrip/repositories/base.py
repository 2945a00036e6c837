"""Common base for repositories that own one collection."""

import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from ..core.exceptions import NotFoundError
from ..schemas.common import utc_now
from ..schemas.registry import (
    ENTITY_KEYS,
    CollectionName,
    dump_collection,
    validate_collection,
    validate_model,
)
from ..store import DocumentStore, Snapshot

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)
ResultT = TypeVar("ResultT")


class CollectionRepository(Generic[EntityT]):
    """
    Read and mutate one collection through the document store.

    Every snapshot read from disk is schema-validated before use, and every
    snapshot about to be written is validated again after the mutation runs,
    so an invalid value never reaches the file.
    """

    collection: CollectionName
    entity_model: Type[EntityT]
    resource_type: str = "entity"

    def __init__(self, store: DocumentStore):
        self.store = store

    @property
    def entity_key(self) -> str:
        return ENTITY_KEYS[self.collection]

    async def read(self) -> Any:
        """Validated collection model for the current snapshot."""
        raw = await self.store.read(self.collection.value)
        return validate_collection(self.collection, raw)

    async def list(self) -> List[EntityT]:
        return getattr(await self.read(), self.entity_key)

    async def get(self, entity_id: str) -> EntityT:
        for entity in await self.list():
            if entity.id == entity_id:
                return entity
        raise NotFoundError(resource_type=self.resource_type, resource_id=entity_id)

    async def mutate(self, mutation: Callable[[List[EntityT]], ResultT]) -> ResultT:
        """
        Run ``mutation`` against the entity list inside one locked update.

        The mutation edits the list in place and returns the caller's result.
        Raising from it aborts the write and releases the lock.
        """
        outcome: Dict[str, Any] = {}

        def updater(raw: Snapshot) -> Snapshot:
            current = validate_collection(self.collection, raw)
            outcome["result"] = mutation(getattr(current, self.entity_key))

            current.meta.version += 1
            current.meta.updated_at = utc_now()

            # Re-validate the mutated snapshot so collection-level rules are checked too
            snapshot = dump_collection(current)
            validate_collection(self.collection, snapshot)
            return snapshot

        await self.store.update(self.collection.value, updater)
        return outcome["result"]

    def build(self, data: Dict[str, Any]) -> EntityT:
        """Validate a new or merged entity."""
        return validate_model(self.entity_model, data, self.resource_type.capitalize())

    def merge(self, entity: EntityT, patch: BaseModel, **stamps: Any) -> EntityT:
        """Shallow-merge the explicitly set fields of ``patch`` and re-validate."""
        merged = entity.model_dump()
        merged.update(patch.model_dump(exclude_unset=True))
        merged.update(stamps)
        return self.build(merged)

    def index_of(self, entities: List[EntityT], entity_id: str) -> int:
        for index, entity in enumerate(entities):
            if entity.id == entity_id:
                return index
        raise NotFoundError(resource_type=self.resource_type, resource_id=entity_id)

    async def replace(self, entity_id: str, change: Callable[[EntityT], EntityT]) -> EntityT:
        """Replace one entity with ``change(entity)`` inside one locked update."""

        def mutation(entities: List[EntityT]) -> EntityT:
            index = self.index_of(entities, entity_id)
            entities[index] = change(entities[index])
            return entities[index]

        return await self.mutate(mutation)

    async def delete(self, entity_id: str) -> EntityT:
        """Hard-delete one entity; ``NotFoundError`` if absent."""

        def mutation(entities: List[EntityT]) -> EntityT:
            return entities.pop(self.index_of(entities, entity_id))

        removed = await self.mutate(mutation)
        logger.info(
            "Entity deleted",
            extra={"collection": self.collection.value, "entity_id": entity_id}
        )
        return removed

    async def find(self, predicate: Callable[[EntityT], bool]) -> Optional[EntityT]:
        for entity in await self.list():
            if predicate(entity):
                return entity
        return None
