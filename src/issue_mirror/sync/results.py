"""Result objects for sync operations.

Structured results provide consistent interfaces for monitoring,
error handling, and CLI output.
"""

from dataclasses import dataclass, field
from typing import Any

from issue_mirror.schemas import SyncStrategy

from .exceptions import IssueSyncError


@dataclass
class SyncResult:
    """Result of one sync run.

    Produced fresh per invocation and never persisted.
    """

    success: bool = True
    """False if the run failed as a whole or was cancelled."""

    synced_count: int = 0
    """Issues whose documents were written."""

    skipped_count: int = 0
    """Issues left untouched because nothing changed."""

    errors: list[Exception] = field(default_factory=list)
    """Errors in the order they occurred."""

    duration: int = 0
    """Elapsed wall time in milliseconds."""

    cancelled: bool = False
    """True if the run stopped because cancel() was called."""

    strategy: SyncStrategy | None = None
    """Strategy that produced this result."""

    not_modified: bool = False
    """True if the remote answered the conditional listing with 'not modified'."""

    has_more: bool = False
    """True if the remote holds more matching issues than were fetched."""

    @property
    def error_count(self) -> int:
        """Number of errors recorded."""
        return len(self.errors)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "strategy": self.strategy.value if self.strategy else None,
            "synced_count": self.synced_count,
            "skipped_count": self.skipped_count,
            "error_count": self.error_count,
            "errors": [
                {
                    "issue_number": e.issue_number if isinstance(e, IssueSyncError) else None,
                    "error": str(e),
                    "error_type": type(e).__name__,
                }
                for e in self.errors
            ],
            "duration_ms": self.duration,
            "cancelled": self.cancelled,
            "not_modified": self.not_modified,
            "has_more": self.has_more,
        }
