"""GitHub client exceptions."""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors.

    Any non-2xx answer from the remote that is not a "not modified"
    response ends up as this type (or a subclass).
    """

    pass


class GitHubAuthenticationError(GitHubClientError):
    """Raised when no usable credential is available or GitHub answers 401."""

    pass


class GitHubRetryableError(GitHubClientError):
    """Base class for errors that may succeed if tried again later."""

    pass


class GitHubRateLimitError(GitHubRetryableError):
    """Raised when rate limit is exceeded (403 with rate limit headers)."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class GitHubNotFoundError(GitHubClientError):
    """Raised when a resource is not found (404)."""

    pass
