"""Factory functions for creating test data.

This module provides factory functions for:
- Internal models (Issue, Comment) used by the store and the engine
- Raw GitHub API payloads (dicts) used by client and schema tests

Design principles:
- Factories provide sensible defaults that can be overridden
- Payload factories return dicts suitable for Pydantic model validation
"""

from typing import Any

from issue_mirror.schemas import Comment, Issue, IssueState, Label, Milestone, User

# Import test timeline constants
from tests.conftest import JAN_10_ISO, JAN_15_ISO, JAN_16_ISO


# -----------------------------------------------------------------------------
# Model Factories
# -----------------------------------------------------------------------------
def make_user(login: str = "octocat", **overrides: Any) -> User:
    data: dict[str, Any] = {
        "login": login,
        "id": 583231,
        "avatar_url": f"https://avatars.githubusercontent.com/{login}",
        "url": f"https://api.github.com/users/{login}",
    }
    data.update(overrides)
    return User(**data)


def make_comment(
    login: str = "hubot",
    body: str = "Looks good to me.",
    created_at: str = JAN_15_ISO,
    **overrides: Any,
) -> Comment:
    """Create a Comment as the store reads it back (no id or url)."""
    data: dict[str, Any] = {
        "user": User(login=login),
        "body": body,
        "created_at": created_at,
        "updated_at": created_at,
    }
    data.update(overrides)
    return Comment(**data)


def make_issue(
    number: int = 1,
    *,
    title: str | None = None,
    body: str | None = "Steps to reproduce:\n\n1. Start the app\n2. Watch it crash",
    state: IssueState = IssueState.OPEN,
    updated_at: str = JAN_16_ISO,
    comments: list[Comment] | None = None,
    **overrides: Any,
) -> Issue:
    """Create an Issue model.

    Args:
        number: Issue number (id defaults to 1000 + number)
        title: Title (defaults to "Issue #<number>")
        body: Issue body text
        state: open or closed
        updated_at: Last update timestamp
        comments: Comments (None for a list-endpoint summary)
        **overrides: Additional field overrides

    Returns:
        Issue instance
    """
    data: dict[str, Any] = {
        "id": 1000 + number,
        "number": number,
        "title": title or f"Issue #{number}",
        "body": body,
        "state": state,
        "created_at": JAN_10_ISO,
        "updated_at": updated_at,
        "author": make_user(),
        "assignees": [],
        "labels": [],
        "milestone": None,
        "comments": comments,
        "url": f"https://api.github.com/repos/octo/hello-world/issues/{number}",
        "html_url": f"https://github.com/octo/hello-world/issues/{number}",
    }
    data.update(overrides)
    return Issue(**data)


def make_full_issue(number: int = 7) -> Issue:
    """Issue exercising every optional field of the document format."""
    return make_issue(
        number,
        title="Crash when config file is empty",
        state=IssueState.CLOSED,
        closed_at="2024-01-20T16:00:00Z",
        assignees=[make_user("alice", id=1), make_user("bob-smith", id=2)],
        labels=[
            Label(id=10, name="bug", color="d73a4a", description="Something isn't working"),
            Label(id=11, name="good first issue", color="7057ff"),
        ],
        milestone=Milestone(
            id=20,
            number=3,
            title="v1.2",
            description="Spring release",
            state=IssueState.OPEN,
            due_on="2024-03-01T08:00:00Z",
            url="https://api.github.com/repos/octo/hello-world/milestones/3",
        ),
        comments=[
            make_comment("alice", "I can reproduce this on 1.1.0."),
            make_comment("bob-smith", "Fixed in #12.\n\n```\nconfig = {}\n```", "2024-01-19T08:30:00Z"),
        ],
    )


# -----------------------------------------------------------------------------
# GitHub API Payload Factories
# -----------------------------------------------------------------------------
def make_github_user(login: str = "octocat", user_id: int = 583231) -> dict[str, Any]:
    return {
        "login": login,
        "id": user_id,
        "avatar_url": f"https://avatars.githubusercontent.com/u/{user_id}",
        "url": f"https://api.github.com/users/{login}",
        "type": "User",
    }


def make_github_issue(
    number: int = 1,
    *,
    state: str = "open",
    updated_at: str = JAN_16_ISO,
    labels: list[dict[str, Any]] | None = None,
    milestone: dict[str, Any] | None = None,
    pull_request: bool = False,
    **overrides: Any,
) -> dict[str, Any]:
    """Create a raw issue item as returned by GET /repos/{owner}/{repo}/issues.

    Args:
        number: Issue number (id defaults to 1000 + number)
        state: "open" or "closed"
        updated_at: Last update timestamp
        labels: Raw label objects
        milestone: Raw milestone object
        pull_request: Mark the item as a pull request
        **overrides: Additional field overrides

    Returns:
        Dict matching the GitHub REST API structure
    """
    data: dict[str, Any] = {
        "id": 1000 + number,
        "number": number,
        "title": f"Issue #{number}",
        "body": f"Body of issue {number}",
        "state": state,
        "user": make_github_user(),
        "assignees": [],
        "labels": labels or [],
        "milestone": milestone,
        "comments": 0,
        "created_at": JAN_10_ISO,
        "updated_at": updated_at,
        "closed_at": None,
        "url": f"https://api.github.com/repos/octo/hello-world/issues/{number}",
        "html_url": f"https://github.com/octo/hello-world/issues/{number}",
    }
    if pull_request:
        data["pull_request"] = {
            "url": f"https://api.github.com/repos/octo/hello-world/pulls/{number}",
        }
    data.update(overrides)
    return data


def make_github_comment(
    comment_id: int = 1,
    login: str = "hubot",
    body: str = "Thanks for the report!",
    created_at: str = JAN_15_ISO,
) -> dict[str, Any]:
    return {
        "id": comment_id,
        "user": make_github_user(login, 2000 + comment_id),
        "body": body,
        "created_at": created_at,
        "updated_at": created_at,
        "url": f"https://api.github.com/repos/octo/hello-world/issues/comments/{comment_id}",
    }
