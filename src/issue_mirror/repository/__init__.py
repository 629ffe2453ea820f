"""Repository identity and allow-list filters."""

from .filters import (
    ORGANIZATION_FILTER,
    REPOSITORY_FILTER,
    FilterDecision,
    evaluate_sync_filters,
    matches_organization_filter,
    matches_repository_filter,
    normalize_filter_values,
)
from .locator import get_remote_url, get_repository_info, is_git_repository, parse_remote_url

__all__ = [
    # Locator
    "get_remote_url",
    "get_repository_info",
    "is_git_repository",
    "parse_remote_url",
    # Filters
    "ORGANIZATION_FILTER",
    "REPOSITORY_FILTER",
    "FilterDecision",
    "evaluate_sync_filters",
    "matches_organization_filter",
    "matches_repository_filter",
    "normalize_filter_values",
]
