"""Periodic auto-sync.

The scheduler is a handle owned by a SyncContext; nothing here lives at
module level, so stopping a context stops its timer and nothing else.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from issue_mirror.logging import get_logger
from issue_mirror.schemas import RepositoryInfo, SyncOptions

from .engine import SyncEngine
from .exceptions import SyncInProgressError
from .progress import ProgressCallback
from .results import SyncResult

logger = get_logger(__name__)


class AutoSyncScheduler:
    """Runs an async job every ``interval_seconds`` until stopped.

    Usage:
        scheduler = AutoSyncScheduler(job, interval_seconds=3600)
        await scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        *,
        run_immediately: bool = False,
    ) -> None:
        """Initialize the scheduler.

        Args:
            job: Coroutine factory invoked on every tick
            interval_seconds: Delay between the end of one run and the next
            run_immediately: Run the job once as soon as the scheduler starts
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._job = job
        self._interval = interval_seconds
        self._run_immediately = run_immediately
        self._task: asyncio.Task[None] | None = None
        self._runs = 0

    @property
    def is_running(self) -> bool:
        """Whether the periodic task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def runs(self) -> int:
        """Number of completed job invocations."""
        return self._runs

    async def start(self) -> None:
        """Start the periodic task (no-op if already running)."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Auto-sync started (interval={}s)", self._interval)

    async def stop(self) -> None:
        """Cancel the periodic task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Auto-sync stopped")

    async def _loop(self) -> None:
        if not self._run_immediately:
            await asyncio.sleep(self._interval)
        while True:
            try:
                await self._job()
            except Exception as e:
                # Keep ticking; the next run may succeed
                logger.error("Auto-sync run failed: {}", e)
            self._runs += 1
            await asyncio.sleep(self._interval)


@dataclass
class SyncContext:
    """Everything one mirrored repository needs: engine, identity, options and timer.

    Usage:
        context = SyncContext(engine, repo, options)
        await context.start_auto_sync(3600)
        ...
        await context.close()
    """

    engine: SyncEngine
    repo: RepositoryInfo
    options: SyncOptions
    on_progress: ProgressCallback | None = None
    last_result: SyncResult | None = None
    scheduler: AutoSyncScheduler | None = field(default=None, repr=False)

    async def run_once(self) -> SyncResult | None:
        """Run one sync with the configured strategy.

        Returns:
            The result, or None if a run was already active on the engine
        """
        try:
            self.last_result = await self.engine.sync_with_strategy(
                self.repo, self.options, self.on_progress
            )
        except SyncInProgressError:
            logger.info("Skipping auto-sync of {}: a sync is already running", self.repo.full_name)
            return None
        return self.last_result

    async def start_auto_sync(self, interval_seconds: float, *, run_immediately: bool = False) -> None:
        """Start (or restart) periodic syncing."""
        await self.stop_auto_sync()
        self.scheduler = AutoSyncScheduler(
            self.run_once, interval_seconds, run_immediately=run_immediately
        )
        await self.scheduler.start()

    async def stop_auto_sync(self) -> None:
        """Stop periodic syncing if active."""
        if self.scheduler is not None:
            await self.scheduler.stop()
            self.scheduler = None

    @property
    def auto_sync_running(self) -> bool:
        return self.scheduler is not None and self.scheduler.is_running

    async def close(self) -> None:
        """Stop the timer and cancel any run in progress."""
        await self.stop_auto_sync()
        if self.engine.is_syncing():
            self.engine.cancel()
