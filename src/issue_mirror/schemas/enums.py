"""Enums for Pydantic schemas."""

from enum import StrEnum


class IssueState(StrEnum):
    """State of an issue or milestone on GitHub."""

    OPEN = "open"
    CLOSED = "closed"


class SyncPeriod(StrEnum):
    """How far back a sync reaches when no explicit 'since' is given."""

    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    ONE_YEAR = "1year"
    ALL = "all"

    @property
    def months(self) -> int | None:
        """Number of calendar months covered (None for ALL)."""
        return _PERIOD_MONTHS.get(self)


_PERIOD_MONTHS = {
    SyncPeriod.THREE_MONTHS: 3,
    SyncPeriod.SIX_MONTHS: 6,
    SyncPeriod.ONE_YEAR: 12,
}


class SyncStrategy(StrEnum):
    """Strategy for syncing issues from GitHub.

    Different strategies trade off between completeness and efficiency.
    """

    FULL = "full"
    """Re-evaluate every fetched issue and replace the sync state."""

    INCREMENTAL = "incremental"
    """Only fetch issues updated since the last checkpoint."""

    LAZY = "lazy"
    """Lightweight alias of INCREMENTAL."""


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""
