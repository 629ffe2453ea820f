"""Storage exceptions."""

from pathlib import Path


class StorageError(Exception):
    """Raised when a mirrored document or the sync state cannot be read or written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path
