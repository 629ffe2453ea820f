"""Configuration settings for Issue Mirror."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RateLimitConfig(BaseModel):
    """Configuration for rate limit health classification.

    Controls the thresholds used when deciding whether the remaining
    quota reported by GitHub deserves a warning in the logs.
    """

    healthy_threshold_pct: float = Field(
        default=50.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is HEALTHY",
    )
    warning_threshold_pct: float = Field(
        default=20.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is WARNING (below healthy, else CRITICAL)",
    )


class SyncConfig(BaseModel):
    """Default sync options and fetch behavior.

    These values seed SyncOptions when the CLI does not override them.
    """

    max_issues: int = Field(
        default=100,
        ge=1,
        description="Maximum number of issues fetched per sync",
    )
    sync_period: Literal["3months", "6months", "1year", "all"] = Field(
        default="3months",
        description="How far back the 'since' filter reaches",
    )
    include_closed_issues: bool = Field(
        default=False,
        description="Also mirror closed issues",
    )
    sync_strategy: Literal["full", "incremental", "lazy"] = Field(
        default="incremental",
        description="Default sync strategy",
    )
    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Issues requested per page (GitHub maximum is 100)",
    )
    auto_sync_interval_seconds: int = Field(
        default=3600,
        ge=60,
        description="Interval between automatic syncs in watch mode",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )

    # --------------------------------------------------------------------------
    # Storage
    # --------------------------------------------------------------------------
    storage_dir: Path = Field(
        default=Path(".github-issues"),
        description="Directory holding the mirrored issue documents",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Repository allow-lists (empty = allow all)
    # --------------------------------------------------------------------------
    organization_filter: list[str] = Field(
        default_factory=list,
        description="Owners allowed to be mirrored",
    )
    repository_filter: list[str] = Field(
        default_factory=list,
        description="Repositories (owner/repo or repo) allowed to be mirrored",
    )

    # --------------------------------------------------------------------------
    # Nested configuration
    # --------------------------------------------------------------------------
    rate_limit: RateLimitConfig = Field(
        default_factory=RateLimitConfig,
        description="Rate limit classification configuration",
    )
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Sync defaults",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
