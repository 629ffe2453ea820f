"""Test fixtures for Issue Mirror."""

from .github_responses import (
    GITHUB_COMMENT_RESPONSE,
    GITHUB_ISSUE_CLOSED_RESPONSE,
    GITHUB_ISSUE_GHOST_AUTHOR,
    GITHUB_LABEL_RESPONSE,
    GITHUB_MILESTONE_RESPONSE,
    GITHUB_PULL_REQUEST_ITEM,
    GITHUB_USER_RESPONSE,
)
from .rate_limit_responses import RATE_LIMIT_RESPONSE_HEALTHY, rate_limit_headers

__all__ = [
    # Mock GitHub API responses
    "GITHUB_COMMENT_RESPONSE",
    "GITHUB_ISSUE_CLOSED_RESPONSE",
    "GITHUB_ISSUE_GHOST_AUTHOR",
    "GITHUB_LABEL_RESPONSE",
    "GITHUB_MILESTONE_RESPONSE",
    "GITHUB_PULL_REQUEST_ITEM",
    "GITHUB_USER_RESPONSE",
    # Rate limit
    "RATE_LIMIT_RESPONSE_HEALTHY",
    "rate_limit_headers",
]
