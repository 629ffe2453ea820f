"""Progress events emitted by the sync engine."""

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class SyncProgress:
    """A progress update event.

    ``total`` is 0 until the remote listing has resolved.
    """

    total: int
    current: int
    message: str

    @property
    def progress_percent(self) -> float:
        """Completion percentage (0-100)."""
        if self.total == 0:
            return 0.0
        return min(100.0, (self.current / self.total) * 100)


ProgressCallback = Callable[[SyncProgress], None]
