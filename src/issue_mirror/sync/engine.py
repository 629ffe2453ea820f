"""Sync engine - Fetch → Diff → Detail fetch → Persist → Checkpoint.

Orchestrates mirroring of one repository's issues from GitHub into an
IssueStore under the full, incremental or lazy strategy, reporting
progress and honoring cooperative cancellation.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from issue_mirror.github.client import format_timestamp
from issue_mirror.logging import bind_issue, bind_repo, get_logger
from issue_mirror.schemas import Issue, RepositoryInfo, SyncOptions, SyncState, SyncStrategy
from issue_mirror.storage import StorageError

from .exceptions import IssueSyncError, SyncInProgressError
from .progress import ProgressCallback, SyncProgress
from .results import SyncResult

if TYPE_CHECKING:
    from issue_mirror.github.client import GitHubClient
    from issue_mirror.storage import IssueStore

logger = get_logger(__name__)


class SyncRunState(StrEnum):
    """Lifecycle of a run: IDLE -> RUNNING -> {COMPLETED, CANCELLED, FAILED} -> IDLE."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


def _require_identity(repo: RepositoryInfo | None) -> RepositoryInfo:
    if repo is None or not repo.owner or not repo.repo:
        raise ValueError("Repository owner and name are required to sync")
    return repo


class SyncEngine:
    """Mirrors one repository's issues into a store.

    Only one run may be active at a time; a second ``sync`` or
    ``incremental_sync`` while one is running raises SyncInProgressError.

    Cancellation is cooperative: ``cancel()`` sets a flag that is checked
    before each issue and once more before anything is written. A network
    call already in flight is not interrupted. ``cancel()`` while idle is
    ignored, so it never carries over into a later run.

    A run that cannot write every changed document fails without touching
    the sync state, so the next incremental run lists those issues again.

    Usage:
        async with GitHubClient() as client:
            engine = SyncEngine(client, IssueStore(settings.storage_dir))
            result = await engine.sync_with_strategy(repo, SyncOptions())
            if result.success:
                print(f"{result.synced_count} issues written")
    """

    def __init__(self, client: GitHubClient, store: IssueStore) -> None:
        """Initialize the sync engine.

        Args:
            client: GitHub API client
            store: Destination store for documents and the sync state
        """
        self._client = client
        self._store = store
        self._state = SyncRunState.IDLE
        self._last_outcome: SyncRunState | None = None
        self._cancel_requested = False

    @property
    def state(self) -> SyncRunState:
        """IDLE or RUNNING."""
        return self._state

    @property
    def last_outcome(self) -> SyncRunState | None:
        """COMPLETED, CANCELLED or FAILED for the previous run (None before any run)."""
        return self._last_outcome

    def is_syncing(self) -> bool:
        return self._state is SyncRunState.RUNNING

    def cancel(self) -> None:
        """Request the current run to stop at its next checkpoint."""
        if not self.is_syncing():
            logger.debug("No sync running; ignoring cancel request")
            return
        self._cancel_requested = True
        logger.debug("Sync cancellation requested")

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------
    async def sync(
        self,
        repo: RepositoryInfo,
        options: SyncOptions,
        on_progress: ProgressCallback | None = None,
    ) -> SyncResult:
        """Full sync: re-evaluate every fetched issue and replace the sync state.

        Raises:
            ValueError: If the repository identity is missing
            SyncInProgressError: If another run is active
        """
        return await self._run(repo, options, on_progress, incremental=False)

    async def incremental_sync(
        self,
        repo: RepositoryInfo,
        options: SyncOptions,
        on_progress: ProgressCallback | None = None,
    ) -> SyncResult:
        """Incremental sync from the previous checkpoint.

        The listing is requested with the stored ``last_sync_time`` as
        ``since`` and ``last_etag`` as the conditional token; the new state
        is the union of previously and newly synced ids.

        Raises:
            ValueError: If the repository identity is missing
            SyncInProgressError: If another run is active
        """
        return await self._run(repo, options, on_progress, incremental=True)

    async def sync_with_strategy(
        self,
        repo: RepositoryInfo,
        options: SyncOptions,
        on_progress: ProgressCallback | None = None,
    ) -> SyncResult:
        """Dispatch on ``options.sync_strategy``."""
        match options.sync_strategy:
            case SyncStrategy.FULL:
                return await self.sync(repo, options, on_progress)
            case SyncStrategy.LAZY:
                _emit(on_progress, 0, 0, "Lazy sync (incremental)")
                result = await self.incremental_sync(
                    repo,
                    options.model_copy(update={"sync_strategy": SyncStrategy.INCREMENTAL}),
                    on_progress,
                )
                result.strategy = SyncStrategy.LAZY
                return result
            case _:
                return await self.incremental_sync(repo, options, on_progress)

    async def sync_issue_details(self, repo: RepositoryInfo, issue_number: int) -> Issue:
        """Fetch one issue with all comments and write it immediately.

        Errors from the client or the store propagate to the caller.
        """
        repo = _require_identity(repo)
        issue = await self._client.fetch_issue_details(repo.owner, repo.repo, issue_number)
        await self._store.save_issue(issue)
        return issue

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------
    async def _run(
        self,
        repo: RepositoryInfo,
        options: SyncOptions,
        on_progress: ProgressCallback | None,
        *,
        incremental: bool,
    ) -> SyncResult:
        repo = _require_identity(repo)
        if self.is_syncing():
            raise SyncInProgressError(f"A sync of {repo.full_name} is already running")

        self._state = SyncRunState.RUNNING
        self._cancel_requested = False
        outcome = SyncRunState.FAILED
        repo_logger = bind_repo(repo.owner, repo.repo)
        strategy = SyncStrategy.INCREMENTAL if incremental else SyncStrategy.FULL
        result = SyncResult(strategy=strategy)
        start_time = time.monotonic()
        # Checkpoint from before the listing so edits made during the run are seen next time
        started_at = format_timestamp(datetime.now(UTC))

        try:
            previous = await self._store.load_sync_state() if incremental else None

            _emit(
                on_progress,
                0,
                0,
                "Fetching updated issues from GitHub..."
                if incremental
                else "Fetching issues from GitHub...",
            )
            fetch = await self._client.fetch_issues(
                repo.owner,
                repo.repo,
                options,
                since=previous.last_sync_time if previous else None,
                etag=previous.last_etag if previous else None,
            )
            result.not_modified = fetch.not_modified
            result.has_more = fetch.has_more

            total = len(fetch.issues)
            repo_logger.info("Processing {} issues ({} strategy)", total, strategy.value)
            _emit(on_progress, total, 0, f"Processing {total} issues...")

            pending = await self._process_issues(repo, fetch.issues, result, on_progress)

            if self._cancel_requested:
                result.cancelled = True
                result.success = False
                outcome = SyncRunState.CANCELLED
                repo_logger.info(
                    "Sync cancelled; discarding {} queued documents", len(pending)
                )
                return result

            if pending:
                _emit(on_progress, total, total, f"Saving {len(pending)} issues...")
                batch = await self._store.save_issues(pending)
                result.synced_count = len(batch.saved)
                for number, error in batch.failed.items():
                    sync_error = IssueSyncError(f"Failed to save issue #{number}: {error}", number)
                    sync_error.__cause__ = error
                    result.errors.append(sync_error)
                if not batch.success:
                    # Unwritten issues must be listed again by the next run
                    result.success = False
                    repo_logger.error(
                        "Sync failed: {} of {} documents not written; sync state kept",
                        len(batch.failed),
                        len(pending),
                    )
                    return result

            seen_ids = {issue.id for issue in fetch.issues}
            # Full sync replaces the checkpoint; incremental merges into it
            base = (previous or SyncState()) if incremental else SyncState()
            state = base.merged_with(seen_ids, last_sync_time=started_at, last_etag=fetch.etag)
            await self._store.save_sync_state(state)

            outcome = SyncRunState.COMPLETED
            _emit(
                on_progress,
                total,
                total,
                "Incremental sync completed" if incremental else "Sync completed",
            )
            repo_logger.info(
                "Sync completed: {} written, {} skipped, {} errors",
                result.synced_count,
                result.skipped_count,
                result.error_count,
            )
        except Exception as e:
            repo_logger.error("Sync failed: {}", e)
            result.success = False
            result.errors.append(e)
        finally:
            result.duration = int((time.monotonic() - start_time) * 1000)
            self._last_outcome = outcome
            self._cancel_requested = False
            self._state = SyncRunState.IDLE

        return result

    async def _process_issues(
        self,
        repo: RepositoryInfo,
        issues: list[Issue],
        result: SyncResult,
        on_progress: ProgressCallback | None,
    ) -> list[Issue]:
        """Decide per issue whether to fetch details, and queue changed documents.

        Returns:
            Detailed issues whose documents differ from the stored copy
        """
        pending: list[Issue] = []
        total = len(issues)

        for index, summary in enumerate(issues, start=1):
            if self._cancel_requested:
                break

            try:
                if await self._needs_details(summary):
                    detailed = await self._client.fetch_issue_details(
                        repo.owner, repo.repo, summary.number
                    )
                    if await self._store.has_changed(detailed):
                        pending.append(detailed)
                    else:
                        result.skipped_count += 1
                else:
                    result.skipped_count += 1
            except Exception as e:
                issue_logger = bind_issue(repo.owner, repo.repo, summary.number)
                issue_logger.warning("Failed to sync issue: {}", e)
                sync_error = IssueSyncError(f"Issue #{summary.number}: {e}", summary.number)
                sync_error.__cause__ = e
                result.errors.append(sync_error)

            _emit(on_progress, total, index, f"Processing issue #{summary.number}...")

        return pending

    async def _needs_details(self, summary: Issue) -> bool:
        """New issues and issues whose updated_at moved need a detail fetch."""
        try:
            existing = await self._store.load_issue(summary.number)
        except StorageError as e:
            logger.debug("Stored copy of #{} unreadable, refetching: {}", summary.number, e)
            return True
        return existing is None or existing.updated_at != summary.updated_at


def _emit(callback: ProgressCallback | None, total: int, current: int, message: str) -> None:
    if callback is not None:
        callback(SyncProgress(total=total, current=current, message=message))
