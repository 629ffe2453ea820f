"""Pytest configuration and shared fixtures.

Usage Guide:
- For codec and store tests: use the ``store`` fixture (backed by tmp_path)
- For GitHub API tests: build raw payloads with tests.factories.make_github_issue
- For engine tests: use ``mock_client`` and build Issue objects with make_issue
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from issue_mirror.config import get_settings
from issue_mirror.github.client import FetchResult
from issue_mirror.github.rate_limit import RateLimitInfo
from issue_mirror.schemas import RepositoryInfo
from issue_mirror.storage import IssueStore

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Define a consistent "test epoch" for deterministic date matching across tests.
# All hardcoded dates should reference these constants for consistency.
# -----------------------------------------------------------------------------

# Base dates (datetime objects)
JAN_10 = datetime(2024, 1, 10, 9, 0, 0, tzinfo=UTC)   # Issue opened
JAN_15 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)  # First comment
MAR_31 = datetime(2024, 3, 31, 12, 0, 0, tzinfo=UTC)  # Month-end reference

# ISO 8601 strings (as GitHub emits them)
JAN_10_ISO = "2024-01-10T09:00:00Z"
JAN_12_ISO = "2024-01-12T16:00:00Z"   # Issue closed
JAN_15_ISO = "2024-01-15T10:00:00Z"
JAN_16_ISO = "2024-01-16T14:00:00Z"   # Issue updated
JAN_20_ISO = "2024-01-20T16:00:00Z"   # Issue updated again


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep the developer's environment out of tests."""
    for var in ("GITHUB_TOKEN", "STORAGE_DIR", "ORGANIZATION_FILTER", "REPOSITORY_FILTER"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# -----------------------------------------------------------------------------
# Storage Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def storage_dir(tmp_path):
    """Mirror directory that does not exist yet."""
    return tmp_path / ".github-issues"


@pytest.fixture
def store(storage_dir):
    """IssueStore over a fresh temporary directory."""
    return IssueStore(storage_dir)


@pytest.fixture
def repo_info():
    """The repository under sync in engine tests."""
    return RepositoryInfo(
        owner="octo",
        repo="hello-world",
        remote_url="https://github.com/octo/hello-world.git",
    )


# -----------------------------------------------------------------------------
# GitHub Client Fixtures
# -----------------------------------------------------------------------------
def make_rate_limit(remaining: int = 4999, limit: int = 5000) -> RateLimitInfo:
    return RateLimitInfo(limit=limit, remaining=remaining, reset=JAN_15)


def make_fetch_result(issues, *, etag: str | None = '"etag-1"', **overrides) -> FetchResult:
    """FetchResult with a healthy rate limit."""
    return FetchResult(
        issues=list(issues),
        rate_limit=overrides.pop("rate_limit", make_rate_limit()),
        etag=etag,
        **overrides,
    )


@pytest.fixture
def mock_client():
    """GitHubClient stand-in with async fetch methods."""
    client = MagicMock()
    client.fetch_issues = AsyncMock(return_value=make_fetch_result([]))
    client.fetch_issue_details = AsyncMock()
    client.get_rate_limit = AsyncMock(return_value=make_rate_limit())
    return client
