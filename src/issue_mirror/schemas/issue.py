"""Pydantic models for the internal issue record.

Timestamps are kept as the ISO-8601 strings GitHub emits so that the
rendered documents reproduce them byte for byte.
"""

from pydantic import BaseModel, Field

from .enums import IssueState


class User(BaseModel):
    """Reference to a GitHub user."""

    login: str = Field(description="GitHub username")
    id: int = Field(default=0, description="GitHub user ID")
    avatar_url: str = Field(default="", description="Avatar image URL")
    url: str = Field(default="", description="API URL of the user")


class Label(BaseModel):
    """Issue label."""

    id: int = Field(default=0, description="Label ID")
    name: str = Field(description="Label name")
    color: str = Field(default="", description="Label color (hex without #)")
    description: str | None = Field(default=None, description="Label description")


class Milestone(BaseModel):
    """Milestone an issue belongs to."""

    id: int = Field(default=0, description="Milestone ID")
    number: int = Field(default=0, description="Milestone number")
    title: str = Field(description="Milestone title")
    description: str | None = Field(default=None, description="Milestone description")
    state: IssueState = Field(default=IssueState.OPEN, description="Milestone state")
    due_on: str | None = Field(default=None, description="Due date (ISO-8601)")
    url: str = Field(default="", description="API URL of the milestone")


class Comment(BaseModel):
    """Comment on an issue."""

    id: int = Field(default=0, description="Comment ID")
    user: User = Field(description="Comment author")
    body: str = Field(default="", description="Comment text")
    created_at: str = Field(description="When the comment was created")
    updated_at: str = Field(description="When the comment was last edited")
    url: str = Field(default="", description="API URL of the comment")


class Issue(BaseModel):
    """A mirrored GitHub issue.

    ``number`` is unique within a repository and keys the stored document;
    ``id`` is the remote-stable identity recorded in the sync state.
    Summaries from the list endpoint have ``comments`` set to None; details
    carry the full comment list.
    """

    id: int = Field(description="GitHub issue ID")
    number: int = Field(ge=1, description="Issue number")
    title: str = Field(description="Issue title")
    body: str | None = Field(default=None, description="Issue description")
    state: IssueState = Field(description="Issue state (open, closed)")

    created_at: str = Field(description="When the issue was created")
    updated_at: str = Field(description="Last update timestamp")
    closed_at: str | None = Field(default=None, description="When the issue was closed")

    author: User = Field(description="Issue author")
    assignees: list[User] = Field(default_factory=list, description="Assignees (ordered)")
    labels: list[Label] = Field(default_factory=list, description="Labels")
    milestone: Milestone | None = Field(default=None, description="Milestone")
    comments: list[Comment] | None = Field(default=None, description="Comments (details only)")

    url: str = Field(description="API URL of the issue")
    html_url: str = Field(description="Browser URL of the issue")

    @property
    def label_names(self) -> list[str]:
        """Names of the attached labels, in order."""
        return [label.name for label in self.labels]
