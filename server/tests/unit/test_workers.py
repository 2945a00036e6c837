"""Unit tests for background workers."""

import asyncio
from datetime import timedelta

import pytest

from matchtrip.core.exceptions import NotFoundError
from matchtrip.schemas.common import utc_now
from matchtrip.workers import BaseWorker, SessionExpiryWorker
from matchtrip.workers.manager import WorkerManager


class CountingWorker(BaseWorker):
    def __init__(self, interval_seconds=0.01, fail=False):
        super().__init__(name="Counting", interval_seconds=interval_seconds)
        self.calls = 0
        self.fail = fail

    async def process(self):
        self.calls += 1
        if self.fail:
            raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_session_expiry_worker_purges(initialized_store, session_repository, admin):
    """Test one sweep removes expired sessions and keeps live ones."""
    live = await session_repository.create(admin.id, ttl_seconds=3600)
    expired = await session_repository.create(admin.id, ttl_seconds=3600)

    def expire(session):
        return session_repository.build({**session.model_dump(), "expires_at": utc_now() - timedelta(seconds=1)})

    await session_repository.replace(expired.id, expire)

    worker = SessionExpiryWorker(lambda: initialized_store, interval_seconds=60)
    assert await worker.run_once() is True

    assert [session.id for session in await session_repository.list()] == [live.id]


@pytest.mark.asyncio
async def test_failed_iteration_is_reported(store):
    """Test an iteration error is logged and reported, not raised."""
    # Collections were never initialized so the sweep cannot read them
    worker = SessionExpiryWorker(lambda: store)

    with pytest.raises(NotFoundError):
        await worker.process()
    assert await worker.run_once() is False


@pytest.mark.asyncio
async def test_worker_loop_survives_failures():
    """Test the loop keeps running after a failed iteration."""
    worker = CountingWorker(fail=True)

    await worker.start()
    await asyncio.sleep(0.05)
    assert worker.is_running
    await worker.stop()

    assert worker.calls >= 2
    assert not worker.is_running


@pytest.mark.asyncio
async def test_manager_starts_and_stops_workers():
    """Test the manager reports status for every worker."""
    manager = WorkerManager({"counting": CountingWorker()})

    await manager.start_all()
    assert manager.get_worker_status() == {"counting": True}
    assert manager.get_worker("counting").is_running

    await manager.stop_all()
    assert manager.get_worker_status() == {"counting": False}


@pytest.mark.asyncio
async def test_starting_twice_keeps_one_task():
    worker = CountingWorker(interval_seconds=60)

    await worker.start()
    task = worker._task
    await worker.start()

    assert worker._task is task
    await worker.stop()
