"""Document store interface."""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Union

Snapshot = Dict[str, Any]
Updater = Callable[[Snapshot], Union[Snapshot, Awaitable[Snapshot]]]


class DocumentStore(ABC):
    """
    Named-collection store with serialized read-modify-write.

    Repositories depend only on this interface, so a transactional backend can
    replace the file implementation without touching repository logic.
    """

    @abstractmethod
    async def read(self, collection: str) -> Snapshot:
        """
        Return the committed snapshot of a collection.

        Raises:
            NotFoundError: If the collection does not exist
        """

    @abstractmethod
    async def update(self, collection: str, updater: Updater) -> Snapshot:
        """
        Apply ``updater`` to the current snapshot under an exclusive lock.

        The snapshot returned by ``updater`` (sync or async) is persisted and
        returned. If ``updater`` raises, nothing is written.

        Raises:
            NotFoundError: If the collection does not exist
            LockTimeoutError: If the lock could not be acquired in time
            StoreError: On unexpected I/O failures
        """

    @abstractmethod
    async def exists(self, collection: str) -> bool:
        """Return True if the collection has been initialized."""

    @abstractmethod
    async def initialize(self, collection: str, snapshot: Snapshot) -> bool:
        """
        Create a collection with ``snapshot`` if it does not exist yet.

        Returns:
            True if the collection was created, False if it already existed
        """
