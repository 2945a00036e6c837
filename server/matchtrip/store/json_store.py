"""File-backed document store with lock-file serialization and atomic writes."""

import asyncio
import contextlib
import inspect
import json
import logging
import os
import re
import time
import uuid
from pathlib import Path

from opentelemetry import trace

from ..core.exceptions import LockTimeoutError, NotFoundError, StoreError
from ..core.observability import metrics_collector
from .base import DocumentStore, Snapshot, Updater

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

COLLECTION_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")
FILE_SUFFIX = ".json"
LOCK_SUFFIX = ".lock"


def _create_lock_file(lock_path: Path) -> None:
    # O_EXCL makes creation fail with FileExistsError while another writer holds it
    fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
    os.close(fd)


def _read_snapshot(path: Path) -> Snapshot:
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def _write_snapshot(path: Path, serialized: str) -> None:
    temp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex}.tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as fh:
            fh.write(serialized)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(temp_path, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(temp_path)
        raise


class JsonFileStore(DocumentStore):
    """
    One JSON file per collection under ``data_dir``.

    Writers serialize on ``<collection>.json.lock``, created with exclusive
    create semantics and polled at a fixed interval up to ``max_retries``
    attempts. Writes go to a temp file that is atomically renamed over the
    target, so readers never observe a partial snapshot.

    Waiting writers are not ordered: whichever retry lands first after a
    release wins. A lock file orphaned by a process crash blocks that
    collection until it is removed by hand.
    """

    def __init__(
        self,
        data_dir: Path | str,
        retry_delay_seconds: float = 0.02,
        max_retries: int = 250,
    ):
        self.data_dir = Path(data_dir)
        self.retry_delay_seconds = retry_delay_seconds
        self.max_retries = max_retries

    def path_for(self, collection: str) -> Path:
        """Resolve the file backing a collection."""
        if not COLLECTION_NAME_PATTERN.match(collection):
            raise StoreError(collection, f"Invalid collection name '{collection}'")
        return self.data_dir / f"{collection}{FILE_SUFFIX}"

    def lock_path_for(self, collection: str) -> Path:
        path = self.path_for(collection)
        return path.with_name(f"{path.name}{LOCK_SUFFIX}")

    async def exists(self, collection: str) -> bool:
        return await asyncio.to_thread(self.path_for(collection).is_file)

    async def read(self, collection: str) -> Snapshot:
        return await self._read(collection, self.path_for(collection))

    async def update(self, collection: str, updater: Updater) -> Snapshot:
        path = self.path_for(collection)

        if not await asyncio.to_thread(path.is_file):
            raise NotFoundError(resource_type="collection", resource_id=collection)

        with tracer.start_as_current_span("store.update") as span:
            span.set_attribute("store.collection", collection)

            lock_path = await self._acquire_lock(collection)
            try:
                current = await self._read(collection, path)

                updated = updater(current)
                if inspect.isawaitable(updated):
                    updated = await updated

                await self._write(collection, path, updated)
            except BaseException:
                metrics_collector.record_store_update(collection, "aborted")
                raise
            finally:
                await self._release_lock(collection, lock_path)

        metrics_collector.record_store_update(collection, "committed")
        return updated

    async def initialize(self, collection: str, snapshot: Snapshot) -> bool:
        path = self.path_for(collection)

        try:
            await asyncio.to_thread(self.data_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(collection, f"Failed to create data directory {self.data_dir}", cause=e) from e

        if await asyncio.to_thread(path.is_file):
            return False

        lock_path = await self._acquire_lock(collection)
        try:
            # Another writer may have created it while we waited for the lock
            if await asyncio.to_thread(path.is_file):
                return False
            await self._write(collection, path, snapshot)
        finally:
            await self._release_lock(collection, lock_path)

        logger.info(
            "Collection initialized",
            extra={"collection": collection, "path": str(path)}
        )
        return True

    async def _read(self, collection: str, path: Path) -> Snapshot:
        try:
            return await asyncio.to_thread(_read_snapshot, path)
        except FileNotFoundError:
            raise NotFoundError(resource_type="collection", resource_id=collection)
        except json.JSONDecodeError as e:
            raise StoreError(collection, f"Collection '{collection}' is not valid JSON", cause=e) from e
        except OSError as e:
            raise StoreError(collection, f"Failed to read collection '{collection}'", cause=e) from e

    async def _write(self, collection: str, path: Path, snapshot: Snapshot) -> None:
        try:
            serialized = json.dumps(snapshot, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StoreError(collection, f"Snapshot for '{collection}' is not JSON serializable", cause=e) from e

        try:
            await asyncio.to_thread(_write_snapshot, path, serialized)
        except OSError as e:
            logger.error(
                "Collection write failed, committed snapshot left untouched",
                extra={"collection": collection, "error": str(e)}
            )
            raise StoreError(collection, f"Failed to write collection '{collection}'", cause=e) from e

    async def _acquire_lock(self, collection: str) -> Path:
        lock_path = self.lock_path_for(collection)
        started = time.monotonic()

        for attempt in range(1, self.max_retries + 1):
            try:
                # Inline: no await may separate creating the lock from owning it
                _create_lock_file(lock_path)
            except FileExistsError:
                await asyncio.sleep(self.retry_delay_seconds)
                continue
            except OSError as e:
                raise StoreError(collection, f"Failed to acquire lock for collection '{collection}'", cause=e) from e

            waited = time.monotonic() - started
            metrics_collector.record_lock_wait(collection, waited)
            if attempt > 1:
                logger.debug(
                    "Collection lock acquired after contention",
                    extra={"collection": collection, "attempts": attempt, "waited_seconds": waited}
                )
            return lock_path

        waited = time.monotonic() - started
        metrics_collector.record_lock_timeout(collection)
        logger.warning(
            "Timed out acquiring collection lock",
            extra={
                "collection": collection,
                "attempts": self.max_retries,
                "waited_seconds": waited,
                "lock_path": str(lock_path),
            }
        )
        raise LockTimeoutError(collection, self.max_retries, waited)

    async def _release_lock(self, collection: str, lock_path: Path) -> None:
        try:
            os.unlink(lock_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(
                "Failed to release collection lock",
                extra={"collection": collection, "lock_path": str(lock_path), "error": str(e)}
            )
