"""Sync engine exceptions."""


class IssueSyncError(Exception):
    """Raised (and collected) when a single issue could not be synced.

    The original cause is kept as ``__cause__``.
    """

    def __init__(self, message: str, issue_number: int) -> None:
        super().__init__(message)
        self.issue_number = issue_number


class SyncInProgressError(RuntimeError):
    """Raised when a sync is started while another run is active on the same engine."""

    pass
