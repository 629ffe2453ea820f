"""Tests for AutoSyncScheduler and SyncContext."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from issue_mirror.schemas import SyncOptions
from issue_mirror.sync import AutoSyncScheduler, SyncContext, SyncInProgressError, SyncResult


async def _wait_for_runs(scheduler: AutoSyncScheduler, runs: int) -> None:
    while scheduler.runs < runs:
        await asyncio.sleep(0.001)


class TestAutoSyncScheduler:
    """Tests for the periodic timer."""

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            AutoSyncScheduler(AsyncMock(), 0)

    async def test_runs_periodically(self):
        job = AsyncMock()
        scheduler = AutoSyncScheduler(job, 0.01, run_immediately=True)

        await scheduler.start()
        await asyncio.wait_for(_wait_for_runs(scheduler, 3), timeout=2)
        await scheduler.stop()

        assert job.await_count >= 3
        assert not scheduler.is_running

    async def test_waits_one_interval_by_default(self):
        job = AsyncMock()
        scheduler = AutoSyncScheduler(job, 60)

        await scheduler.start()
        await asyncio.sleep(0)
        assert scheduler.is_running
        await scheduler.stop()

        job.assert_not_awaited()

    async def test_failures_do_not_stop_timer(self):
        job = AsyncMock(side_effect=[RuntimeError("boom"), None, None])
        scheduler = AutoSyncScheduler(job, 0.01, run_immediately=True)

        await scheduler.start()
        await asyncio.wait_for(_wait_for_runs(scheduler, 2), timeout=2)
        await scheduler.stop()

        assert job.await_count >= 2

    async def test_start_twice_is_noop(self):
        scheduler = AutoSyncScheduler(AsyncMock(), 60)

        await scheduler.start()
        task = scheduler._task
        await scheduler.start()

        assert scheduler._task is task
        await scheduler.stop()

    async def test_stop_without_start(self):
        scheduler = AutoSyncScheduler(AsyncMock(), 60)

        await scheduler.stop()

        assert not scheduler.is_running


@pytest.fixture
def engine():
    engine = MagicMock()
    engine.sync_with_strategy = AsyncMock(return_value=SyncResult(synced_count=2))
    engine.is_syncing.return_value = False
    return engine


class TestSyncContext:
    """Tests for the per-repository sync handle."""

    async def test_run_once_records_result(self, engine, repo_info):
        context = SyncContext(engine, repo_info, SyncOptions())

        result = await context.run_once()

        assert result.synced_count == 2
        assert context.last_result is result
        engine.sync_with_strategy.assert_awaited_once_with(repo_info, SyncOptions(), None)

    async def test_run_once_skips_when_busy(self, engine, repo_info):
        engine.sync_with_strategy.side_effect = SyncInProgressError("busy")
        context = SyncContext(engine, repo_info, SyncOptions())

        assert await context.run_once() is None
        assert context.last_result is None

    async def test_start_and_stop_auto_sync(self, engine, repo_info):
        context = SyncContext(engine, repo_info, SyncOptions())

        await context.start_auto_sync(0.01, run_immediately=True)
        assert context.auto_sync_running
        await asyncio.wait_for(_wait_for_runs(context.scheduler, 1), timeout=2)
        await context.stop_auto_sync()

        assert not context.auto_sync_running
        assert context.scheduler is None
        assert context.last_result is not None

    async def test_restart_replaces_scheduler(self, engine, repo_info):
        context = SyncContext(engine, repo_info, SyncOptions())

        await context.start_auto_sync(60)
        first = context.scheduler
        await context.start_auto_sync(120)

        assert context.scheduler is not first
        assert not first.is_running
        await context.close()

    async def test_close_cancels_active_run(self, engine, repo_info):
        engine.is_syncing.return_value = True
        context = SyncContext(engine, repo_info, SyncOptions())
        await context.start_auto_sync(60)

        await context.close()

        assert not context.auto_sync_running
        engine.cancel.assert_called_once()

    async def test_contexts_are_independent(self, engine, repo_info):
        first = SyncContext(engine, repo_info, SyncOptions())
        second = SyncContext(engine, repo_info, SyncOptions())

        await first.start_auto_sync(60)
        await second.start_auto_sync(60)
        await first.close()

        assert second.auto_sync_running
        await second.close()
