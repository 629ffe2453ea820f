"""Credential providers for the GitHub client.

The client only needs something that hands out a bearer token. Hosts with
their own credential store implement ``TokenProvider``; the CLI uses
``SettingsTokenProvider`` which reads ``GITHUB_TOKEN``.
"""

from __future__ import annotations

from typing import Literal, Protocol

from githubkit import GitHub
from githubkit.exception import RequestFailed
from pydantic import BaseModel, Field

from issue_mirror.config import get_settings
from issue_mirror.logging import get_logger

from .exceptions import GitHubAuthenticationError

logger = get_logger(__name__)


class AuthToken(BaseModel):
    """A bearer token and where it came from."""

    token: str = Field(min_length=1, description="Bearer token")
    type: Literal["pat", "app", "session"] = Field(default="pat", description="Token origin")


class TokenProvider(Protocol):
    """Source of GitHub credentials."""

    async def get_token(self) -> AuthToken:
        """Return a usable token or raise GitHubAuthenticationError."""
        ...

    async def validate_token(self, token: str) -> bool:
        """Check whether ``token`` is accepted by GitHub."""
        ...

    async def clear_token(self) -> None:
        """Forget any stored token."""
        ...


class SettingsTokenProvider:
    """Token provider backed by an explicit token or ``Settings.github_token``."""

    def __init__(self, token: str | None = None, api_url: str | None = None) -> None:
        self._token = token
        self._api_url = api_url or get_settings().github_api_url

    async def get_token(self) -> AuthToken:
        token = (self._token or get_settings().github_token).strip()
        if not token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set GITHUB_TOKEN environment variable."
            )
        return AuthToken(token=token, type="pat")

    async def validate_token(self, token: str) -> bool:
        """Validate by fetching the authenticated user."""
        github = GitHub(token, base_url=self._api_url)
        try:
            resp = await github.rest.users.async_get_authenticated()
        except RequestFailed as e:
            logger.debug("Token validation failed with status {}", e.response.status_code)
            return False
        logger.debug("Token belongs to {}", resp.parsed_data.login)
        return True

    async def clear_token(self) -> None:
        self._token = None
