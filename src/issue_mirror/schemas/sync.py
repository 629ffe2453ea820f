"""Pydantic schemas describing what to sync and how far a sync got."""

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .enums import SyncPeriod, SyncStrategy


class RepositoryInfo(BaseModel):
    """Identity of the remote repository being mirrored."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(min_length=1, description="GitHub org or user (e.g., 'octo')")
    repo: str = Field(min_length=1, description="Repository name (e.g., 'hello-world')")
    remote_url: str = Field(default="", description="Remote URL the identity was parsed from")

    @property
    def full_name(self) -> str:
        """Repository in owner/repo form."""
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_full_name(cls, full_name: str) -> "RepositoryInfo":
        """
        Factory method to create from an ``owner/repo`` string.

        Args:
            full_name: Full repo path like 'octo/hello-world'

        Returns:
            RepositoryInfo instance

        Raises:
            ValueError: If the string is not in owner/repo format
        """
        owner, repo = parse_repo_string(full_name)
        return cls(owner=owner, repo=repo, remote_url=f"https://github.com/{owner}/{repo}")


def parse_repo_string(full_name: str) -> tuple[str, str]:
    """Split ``owner/repo`` into its parts.

    Raises:
        ValueError: If either part is missing or extra slashes are present
    """
    parts = full_name.strip().split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Repository must be in owner/repo format: {full_name!r}")
    return parts[0], parts[1]


class SyncOptions(BaseModel):
    """Options controlling a single sync run."""

    max_issues: int = Field(default=100, ge=1, description="Maximum issues to fetch")
    sync_period: SyncPeriod = Field(
        default=SyncPeriod.THREE_MONTHS, description="Bounds the 'since' filter"
    )
    include_closed_issues: bool = Field(default=False, description="Include closed issues")
    sync_strategy: SyncStrategy = Field(
        default=SyncStrategy.INCREMENTAL, description="Strategy used by sync_with_strategy"
    )
    label_filter: frozenset[str] = Field(
        default_factory=frozenset, description="Label names to keep (empty = all)"
    )
    milestone_filter: frozenset[str] = Field(
        default_factory=frozenset, description="Milestone titles to keep (empty = all)"
    )


class SyncState(BaseModel):
    """Checkpoint written after each completed sync.

    An absent ``last_sync_time`` means the repository was never synced.
    """

    last_sync_time: str | None = Field(default=None, description="ISO-8601 time of last sync")
    last_etag: str | None = Field(default=None, description="ETag of the last list response")
    synced_issue_ids: set[int] = Field(
        default_factory=set, description="Remote IDs of issues known to be synced"
    )

    @field_serializer("synced_issue_ids")
    def _serialize_ids(self, ids: set[int]) -> list[int]:
        return sorted(ids)

    def merged_with(self, issue_ids: set[int], *, last_sync_time: str, last_etag: str | None) -> "SyncState":
        """Return a new state whose id set is the union with ``issue_ids``."""
        return SyncState(
            last_sync_time=last_sync_time,
            last_etag=last_etag,
            synced_issue_ids=self.synced_issue_ids | issue_ids,
        )
