"""Directory-backed store for mirrored issues and the sync checkpoint."""

import asyncio
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from issue_mirror.logging import get_logger
from issue_mirror.schemas import Issue, SyncState

from . import markdown
from .exceptions import StorageError

logger = get_logger(__name__)

SYNC_STATE_FILE = "sync-state.json"
ISSUE_FILE_PREFIX = "issue-"
ISSUE_FILE_SUFFIX = ".md"


@dataclass
class BatchSaveResult:
    """Outcome of saving several issues."""

    saved: list[int] = field(default_factory=list)
    """Numbers of the issues written."""

    failed: dict[int, StorageError] = field(default_factory=dict)
    """Issue number -> error for documents that could not be written."""

    @property
    def success(self) -> bool:
        """True if every document was written."""
        return not self.failed


def _write_atomic(path: Path, text: str) -> None:
    """Write via a temp file in the same directory, then replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


class IssueStore:
    """Persists issues as ``issue-<number>.md`` documents under one directory.

    The directory is created on first write. A missing directory reads as
    an empty mirror with no sync state.

    Usage:
        store = IssueStore(Path(".github-issues"))
        await store.save_issue(issue)
        if await store.has_changed(updated):
            await store.save_issue(updated)
    """

    def __init__(self, storage_dir: Path | str) -> None:
        self._storage_dir = Path(storage_dir)

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    def issue_path(self, issue_number: int) -> Path:
        """Stable document path for an issue number."""
        return self._storage_dir / f"{ISSUE_FILE_PREFIX}{issue_number}{ISSUE_FILE_SUFFIX}"

    @property
    def sync_state_path(self) -> Path:
        return self._storage_dir / SYNC_STATE_FILE

    # -------------------------------------------------------------------------
    # Codec
    # -------------------------------------------------------------------------
    def to_document(self, issue: Issue) -> str:
        return markdown.to_document(issue)

    def from_document(self, text: str) -> Issue:
        return markdown.from_document(text)

    def content_hash(self, text: str) -> str:
        return markdown.content_hash(text)

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------
    async def save_issue(self, issue: Issue) -> None:
        """Write (or overwrite) the document for ``issue``.

        Raises:
            StorageError: If the document cannot be written
        """
        path = self.issue_path(issue.number)
        document = self.to_document(issue)
        try:
            await asyncio.to_thread(_write_atomic, path, document)
        except OSError as e:
            raise StorageError(f"Failed to write issue #{issue.number}: {e}", path) from e
        logger.debug("Saved issue #{} to {}", issue.number, path)

    async def save_issues(
        self, issues: list[Issue], *, stop_on_error: bool = False
    ) -> BatchSaveResult:
        """Write several documents; each write is independent.

        Args:
            issues: Issues to write
            stop_on_error: Raise the first failure instead of collecting it

        Returns:
            BatchSaveResult with the saved numbers and per-issue failures
        """
        result = BatchSaveResult()
        for issue in issues:
            try:
                await self.save_issue(issue)
            except StorageError as e:
                if stop_on_error:
                    raise
                logger.warning("Could not save issue #{}: {}", issue.number, e)
                result.failed[issue.number] = e
            else:
                result.saved.append(issue.number)
        return result

    async def load_issue(self, issue_number: int) -> Issue | None:
        """Read one document.

        Returns:
            The issue, or None if no document exists

        Raises:
            StorageError: If the document exists but cannot be read or parsed
        """
        path = self.issue_path(issue_number)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path.name}: {e}", path) from e

        try:
            return self.from_document(text)
        except StorageError as e:
            e.path = path
            raise

    async def load_all_issues(self) -> list[Issue]:
        """Read every document in the directory, ordered by issue number.

        Unreadable documents are logged and skipped.
        """
        if not self._storage_dir.is_dir():
            return []

        issues: list[Issue] = []
        for path in sorted(self._storage_dir.glob(f"{ISSUE_FILE_PREFIX}*{ISSUE_FILE_SUFFIX}")):
            try:
                text = await asyncio.to_thread(path.read_text, encoding="utf-8")
                issues.append(self.from_document(text))
            except (OSError, StorageError) as e:
                logger.warning("Skipping unreadable document {}: {}", path.name, e)
        issues.sort(key=lambda issue: issue.number)
        return issues

    async def delete_issue(self, issue_number: int) -> None:
        """Remove a document.

        Raises:
            StorageError: If the document does not exist or cannot be removed
        """
        path = self.issue_path(issue_number)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError as e:
            raise StorageError(f"Issue #{issue_number} is not stored", path) from e
        except OSError as e:
            raise StorageError(f"Failed to delete {path.name}: {e}", path) from e
        logger.debug("Deleted issue #{}", issue_number)

    async def has_changed(self, issue: Issue) -> bool:
        """Whether writing ``issue`` would alter the stored document.

        Both sides are re-encoded before hashing. A missing or unreadable
        stored copy counts as changed.
        """
        try:
            existing = await self.load_issue(issue.number)
        except StorageError as e:
            logger.debug("Treating issue #{} as changed: {}", issue.number, e)
            return True
        if existing is None:
            return True
        new_hash = self.content_hash(self.to_document(issue))
        old_hash = self.content_hash(self.to_document(existing))
        return new_hash != old_hash

    # -------------------------------------------------------------------------
    # Sync state
    # -------------------------------------------------------------------------
    async def save_sync_state(self, state: SyncState) -> None:
        """Write the sync checkpoint.

        Raises:
            StorageError: If the file cannot be written
        """
        path = self.sync_state_path
        try:
            await asyncio.to_thread(_write_atomic, path, state.model_dump_json(indent=2))
        except OSError as e:
            raise StorageError(f"Failed to write sync state: {e}", path) from e

    async def load_sync_state(self) -> SyncState | None:
        """Read the sync checkpoint (None if never synced or unreadable)."""
        path = self.sync_state_path
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read sync state: {}", e)
            return None

        try:
            return SyncState.model_validate_json(text)
        except ValidationError as e:
            logger.warning("Ignoring corrupt sync state: {}", e)
            return None
