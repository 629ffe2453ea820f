"""GitHub API client module.

This module provides:
- GitHubClient: Async issue listing and detail fetch with rate limit tracking
- FetchResult: One paginated listing, with ETag and has_more
- Token providers: TokenProvider, SettingsTokenProvider, AuthToken
- Rate limit parsing: RateLimitInfo, RateLimitStatus
"""

from .auth import AuthToken, SettingsTokenProvider, TokenProvider
from .client import FetchResult, GitHubClient, calculate_since
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubRetryableError,
)
from .rate_limit import RateLimitInfo, RateLimitStatus

__all__ = [
    # Client
    "FetchResult",
    "GitHubClient",
    "calculate_since",
    # Auth
    "AuthToken",
    "SettingsTokenProvider",
    "TokenProvider",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubRetryableError",
    # Rate limit
    "RateLimitInfo",
    "RateLimitStatus",
]
