"""Pydantic schemas for parsing GitHub API responses.

These schemas map directly to the GitHub REST API response structure.
See: https://docs.github.com/en/rest/issues/issues
"""

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from .enums import IssueState
from .issue import Comment, Issue, Label, Milestone, User


def _normalize_timestamp(value: Any) -> Any:
    """Render parsed datetimes the way the REST API does (UTC, 'Z' suffix)."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value


Timestamp = Annotated[str, BeforeValidator(_normalize_timestamp)]


class GitHubUser(BaseModel):
    """GitHub user object from API responses."""

    login: str = Field(description="GitHub username")
    id: int = Field(description="GitHub user ID")
    avatar_url: str = Field(default="", description="Avatar image URL")
    url: str = Field(default="", description="API URL of the user")

    def to_user(self) -> User:
        return User(login=self.login, id=self.id, avatar_url=self.avatar_url, url=self.url)


def _user_or_ghost(user: GitHubUser | None) -> User:
    """Deleted accounts come back as null users."""
    if user is None:
        return User(login="unknown")
    return user.to_user()


class GitHubLabel(BaseModel):
    """GitHub label object from API responses."""

    id: int = Field(default=0, description="Label ID")
    name: str = Field(default="", description="Label name")
    color: str | None = Field(default=None, description="Label color (hex without #)")
    description: str | None = Field(default=None, description="Label description")


class GitHubMilestone(BaseModel):
    """GitHub milestone object from API responses."""

    id: int = Field(description="Milestone ID")
    number: int = Field(description="Milestone number")
    title: str = Field(description="Milestone title")
    description: str | None = Field(default=None, description="Milestone description")
    state: IssueState = Field(default=IssueState.OPEN, description="Milestone state")
    due_on: Timestamp | None = Field(default=None, description="Due date")
    url: str = Field(default="", description="API URL of the milestone")


class GitHubComment(BaseModel):
    """GitHub issue comment object from the comments endpoint."""

    id: int = Field(description="Comment ID")
    user: GitHubUser | None = Field(default=None, description="Comment author")
    body: str | None = Field(default=None, description="Comment text")
    created_at: Timestamp = Field(description="When the comment was created")
    updated_at: Timestamp = Field(description="When the comment was last edited")
    url: str = Field(default="", description="API URL of the comment")

    def to_comment(self) -> Comment:
        """
        Factory method to convert to the internal Comment model.

        Returns:
            Comment instance
        """
        return Comment(
            id=self.id,
            user=_user_or_ghost(self.user),
            body=self.body or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
            url=self.url,
        )


class GitHubIssue(BaseModel):
    """GitHub Issue object from API.

    Maps to: GET /repos/{owner}/{repo}/issues and
    GET /repos/{owner}/{repo}/issues/{number}
    """

    id: int = Field(description="Issue ID")
    number: int = Field(description="Issue number")
    title: str = Field(description="Issue title")
    body: str | None = Field(default=None, description="Issue description")
    state: IssueState = Field(description="Issue state (open, closed)")

    user: GitHubUser | None = Field(default=None, description="Issue author")
    assignees: list[GitHubUser] | None = Field(default=None, description="Assignees")
    # Labels can be bare names in some payloads
    labels: list[GitHubLabel | str] = Field(default_factory=list, description="Labels")
    milestone: GitHubMilestone | None = Field(default=None, description="Milestone")

    created_at: Timestamp = Field(description="When the issue was created")
    updated_at: Timestamp = Field(description="Last update timestamp")
    closed_at: Timestamp | None = Field(default=None, description="When the issue was closed")

    url: str = Field(description="API URL")
    html_url: str = Field(description="Browser URL")

    # Present only when the item is a pull request
    pull_request: dict[str, Any] | None = Field(default=None, description="PR marker")

    @property
    def is_pull_request(self) -> bool:
        """Whether the list endpoint returned a pull request for this item."""
        return self.pull_request is not None

    def to_issue(self, comments: list[GitHubComment] | None = None) -> Issue:
        """
        Factory method to convert to the internal Issue model.

        Args:
            comments: Comments from the comments endpoint (details only)

        Returns:
            Issue instance
        """
        labels = []
        for label in self.labels:
            if isinstance(label, str):
                labels.append(Label(name=label))
            else:
                labels.append(
                    Label(
                        id=label.id,
                        name=label.name,
                        color=label.color or "",
                        description=label.description or None,
                    )
                )

        milestone = None
        if self.milestone is not None:
            milestone = Milestone(
                id=self.milestone.id,
                number=self.milestone.number,
                title=self.milestone.title,
                description=self.milestone.description or None,
                state=self.milestone.state,
                due_on=self.milestone.due_on or None,
                url=self.milestone.url,
            )

        return Issue(
            id=self.id,
            number=self.number,
            title=self.title,
            body=self.body or None,
            state=self.state,
            created_at=self.created_at,
            updated_at=self.updated_at,
            closed_at=self.closed_at or None,
            author=_user_or_ghost(self.user),
            assignees=[a.to_user() for a in self.assignees or []],
            labels=labels,
            milestone=milestone,
            comments=[c.to_comment() for c in comments] if comments is not None else None,
            url=self.url,
            html_url=self.html_url,
        )
