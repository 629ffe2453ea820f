"""Pydantic schemas for GitHub API rate limit data.

Rate limit information comes from either:
- x-ratelimit-* response headers (free, present on every response)
- GET /rate_limit API endpoint (does not count against quota)
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, Field, computed_field

from issue_mirror.config import RateLimitConfig


class RateLimitStatus(StrEnum):
    """Rate limit health status.

    Thresholds are configurable but defaults are:
    - HEALTHY: > 50% remaining
    - WARNING: 20-50% remaining
    - CRITICAL: below 20% remaining
    - EXHAUSTED: 0 remaining
    """

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    EXHAUSTED = "exhausted"


class RateLimitInfo(BaseModel):
    """Core-pool quota as last observed from GitHub."""

    limit: int = Field(ge=0, description="Maximum requests allowed per hour")
    remaining: int = Field(ge=0, description="Requests remaining in current window")
    reset: datetime = Field(description="UTC datetime when the window resets")
    used: int = Field(default=0, ge=0, description="Requests used in current window")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining_percent(self) -> float:
        """Percentage of rate limit remaining (0.0 to 100.0)."""
        if self.limit == 0:
            return 0.0
        return (self.remaining / self.limit) * 100

    @property
    def seconds_until_reset(self) -> int:
        """Seconds until rate limit resets (0 if already past)."""
        delta = self.reset - datetime.now(UTC)
        return max(0, int(delta.total_seconds()))

    def get_status(self, config: RateLimitConfig | None = None) -> RateLimitStatus:
        """Determine rate limit health status.

        Args:
            config: Thresholds to apply (defaults to RateLimitConfig())

        Returns:
            RateLimitStatus enum value
        """
        config = config or RateLimitConfig()
        if self.remaining == 0:
            return RateLimitStatus.EXHAUSTED
        if self.remaining_percent >= config.healthy_threshold_pct:
            return RateLimitStatus.HEALTHY
        if self.remaining_percent >= config.warning_threshold_pct:
            return RateLimitStatus.WARNING
        return RateLimitStatus.CRITICAL

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> Self:
        """Parse from HTTP response headers.

        GitHub includes rate limit info in headers on every response:
        - x-ratelimit-limit
        - x-ratelimit-remaining
        - x-ratelimit-used
        - x-ratelimit-reset

        Args:
            headers: HTTP response headers (case-insensitive mapping or dict)

        Returns:
            RateLimitInfo parsed with sensible defaults for missing headers
        """
        lowered = {k.lower(): v for k, v in headers.items()}

        limit = int(lowered.get("x-ratelimit-limit", "5000"))
        remaining = int(lowered.get("x-ratelimit-remaining", str(limit)))
        used = int(lowered.get("x-ratelimit-used", "0"))
        reset_ts = int(lowered.get("x-ratelimit-reset", "0"))

        reset = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts > 0 else datetime.now(UTC)
        return cls(limit=limit, remaining=remaining, used=used, reset=reset)

    @classmethod
    def from_api_response(cls, data: Mapping[str, Any]) -> Self:
        """Parse the core pool from a GET /rate_limit response body.

        Args:
            data: Raw API response dict with 'resources' key

        Returns:
            RateLimitInfo for the core pool
        """
        core = data["resources"]["core"]
        return cls(
            limit=core["limit"],
            remaining=core["remaining"],
            used=core.get("used", 0),
            reset=datetime.fromtimestamp(core["reset"], tz=UTC),
        )
