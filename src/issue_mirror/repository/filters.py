"""Allow-list filters deciding whether a repository may be mirrored.

Matching is case-insensitive. Empty lists allow everything. A repository
filter entry is either ``repo`` (any owner) or ``owner/repo``; anything
else never matches.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from issue_mirror.schemas import RepositoryInfo

ORGANIZATION_FILTER = "organization_filter"
REPOSITORY_FILTER = "repository_filter"


@dataclass(frozen=True)
class FilterDecision:
    """Outcome of evaluating both allow-lists."""

    allowed: bool
    filtered_by: list[str] = field(default_factory=list)


def normalize_filter_values(values: Iterable[str] | None) -> list[str]:
    """Trim entries and drop blanks."""
    return [value.strip() for value in values or [] if value.strip()]


def matches_organization_filter(owner: str, organization_filter: list[str]) -> bool:
    if not organization_filter:
        return True
    owner_lower = owner.lower()
    return any(org.lower() == owner_lower for org in organization_filter)


def _matches_entry(entry: str, owner_lower: str, repo_lower: str) -> bool:
    normalized = entry.strip().lower()
    if not normalized:
        return False
    parts = normalized.split("/")
    if len(parts) == 1:
        return parts[0] == repo_lower
    if len(parts) == 2:
        filter_owner, filter_repo = parts
        if not filter_owner or not filter_repo:
            return False
        return filter_owner == owner_lower and filter_repo == repo_lower
    return False


def matches_repository_filter(owner: str, repo: str, repository_filter: list[str]) -> bool:
    if not repository_filter:
        return True
    owner_lower, repo_lower = owner.lower(), repo.lower()
    return any(_matches_entry(entry, owner_lower, repo_lower) for entry in repository_filter)


def evaluate_sync_filters(
    repo: RepositoryInfo,
    repository_filter: list[str],
    organization_filter: list[str],
) -> FilterDecision:
    """Evaluate both allow-lists.

    Returns:
        FilterDecision; ``filtered_by`` names every list that rejected the repository
    """
    filtered_by: list[str] = []
    if not matches_organization_filter(repo.owner, organization_filter):
        filtered_by.append(ORGANIZATION_FILTER)
    if not matches_repository_filter(repo.owner, repo.repo, repository_filter):
        filtered_by.append(REPOSITORY_FILTER)
    return FilterDecision(allowed=not filtered_by, filtered_by=filtered_by)
