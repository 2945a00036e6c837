"""Document store configuration and collection bootstrap."""

import logging
from typing import Dict

from ..schemas.registry import CollectionName, empty_collection
from ..store import DocumentStore, JsonFileStore
from .config import settings

logger = logging.getLogger(__name__)


def create_store() -> JsonFileStore:
    """Build the file store from settings."""
    return JsonFileStore(
        settings.data_dir,
        retry_delay_seconds=settings.lock_retry_delay_seconds,
        max_retries=settings.lock_max_retries,
    )


# Process-wide store; every request shares its locks
store: DocumentStore = create_store()


def get_store() -> DocumentStore:
    """
    Dependency function that returns the document store.

    Returns:
        DocumentStore: The configured store
    """
    return store


async def init_collections(target: DocumentStore = None) -> Dict[str, bool]:
    """Create every missing collection with an empty snapshot; returns which were created."""
    target = target or store
    created = {}
    for name in CollectionName:
        created[name.value] = await target.initialize(name.value, empty_collection(name))
    logger.info(
        "Collections ready",
        extra={"created": [name for name, was_created in created.items() if was_created]}
    )
    return created


async def collection_status(target: DocumentStore = None) -> Dict[str, bool]:
    """Which collections exist on disk."""
    target = target or store
    return {name.value: await target.exists(name.value) for name in CollectionName}
