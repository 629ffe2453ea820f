"""Markdown document codec for mirrored issues.

Each issue is stored as YAML front matter carrying the structured fields,
followed by a rendered body meant for humans:

    ---
    id: 1001
    number: 1
    title: Crash on start
    ...
    ---

    # Crash on start

    <issue body>

    ---

    **Author:** @octocat
    **Created:** 2024-01-01T00:00:00Z
    ...

    ---

    ## Comments

    ### @hubot - 2024-01-02T00:00:00Z

    <comment body>

Comment ids, urls and user ids are not written, so they come back as
zero or empty. Everything else survives a round trip.
"""

import hashlib
import re
from typing import Any

import frontmatter
import yaml
from pydantic import ValidationError

from issue_mirror.schemas import Comment, Issue, IssueState, Label, Milestone, User

from .exceptions import StorageError

RULE = "---\n\n"
SUMMARY_MARKER = RULE + "**Author:**"
COMMENTS_MARKER = RULE + "## Comments\n"

# GitHub logins: alphanumerics with single inner hyphens; GitHub Apps add "[bot]"
COMMENT_HEADING = re.compile(
    r"^### @([A-Za-z0-9](?:-?[A-Za-z0-9])*(?:\[bot\])?) - ([\d\-T:Z]+)[ \t]*$",
    re.MULTILINE,
)


def content_hash(text: str) -> str:
    """SHA-256 hex digest of a rendered document."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------
def _label_data(label: Label) -> dict[str, Any]:
    data: dict[str, Any] = {"id": label.id, "name": label.name, "color": label.color}
    if label.description:
        data["description"] = label.description
    return data


def _milestone_data(milestone: Milestone) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": milestone.id,
        "number": milestone.number,
        "title": milestone.title,
    }
    if milestone.description:
        data["description"] = milestone.description
    data["state"] = milestone.state.value
    if milestone.due_on:
        data["due_on"] = milestone.due_on
    data["url"] = milestone.url
    return data


def _metadata(issue: Issue) -> dict[str, Any]:
    metadata: dict[str, Any] = {
        "id": issue.id,
        "number": issue.number,
        "title": issue.title,
        "state": issue.state.value,
        "created_at": issue.created_at,
        "updated_at": issue.updated_at,
    }
    if issue.closed_at:
        metadata["closed_at"] = issue.closed_at
    metadata["author"] = issue.author.model_dump()
    metadata["assignees"] = [user.model_dump() for user in issue.assignees]
    metadata["labels"] = [_label_data(label) for label in issue.labels]
    if issue.milestone is not None:
        metadata["milestone"] = _milestone_data(issue.milestone)
    metadata["url"] = issue.url
    metadata["html_url"] = issue.html_url
    return metadata


def _summary(issue: Issue) -> str:
    """The ``**Author:**`` block; rebuilt from front matter when decoding."""
    lines = [
        f"**Author:** @{issue.author.login}",
        f"**Created:** {issue.created_at}",
        f"**Updated:** {issue.updated_at}",
    ]
    if issue.closed_at:
        lines.append(f"**Closed:** {issue.closed_at}")
    if issue.assignees:
        lines.append("**Assignees:** " + ", ".join(f"@{a.login}" for a in issue.assignees))
    if issue.labels:
        lines.append("**Labels:** " + ", ".join(issue.label_names))
    if issue.milestone is not None:
        lines.append(f"**Milestone:** {issue.milestone.title}")
    return "\n".join(lines)


def _render_body(issue: Issue) -> str:
    lines = [f"# {issue.title}", ""]

    body = (issue.body or "").strip()
    if body:
        lines += [body, ""]

    lines += ["---", "", _summary(issue)]

    if issue.comments:
        lines += ["", "---", "", "## Comments", ""]
        for comment in issue.comments:
            lines += [
                f"### @{comment.user.login} - {comment.created_at}",
                "",
                comment.body.strip(),
                "",
            ]

    return "\n".join(lines)


def to_document(issue: Issue) -> str:
    """Render an issue as a Markdown document with YAML front matter.

    Args:
        issue: Issue to render (comments are included when present)

    Returns:
        Document text, newline terminated
    """
    post = frontmatter.Post(_render_body(issue))
    post.metadata = _metadata(issue)
    return frontmatter.dumps(post, sort_keys=False) + "\n"


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------
def _user(value: Any) -> User:
    if isinstance(value, str):
        return User(login=value)
    return User.model_validate(value)


def _label(value: Any) -> Label:
    if isinstance(value, str):
        return Label(name=value)
    return Label(
        id=value.get("id") or 0,
        name=value.get("name") or "",
        color=value.get("color") or "",
        description=value.get("description") or None,
    )


def _milestone(value: Any) -> Milestone | None:
    if not value:
        return None
    if isinstance(value, str):
        return Milestone(title=value)
    return Milestone(
        id=value.get("id") or 0,
        number=value.get("number") or 0,
        title=value.get("title") or "",
        description=value.get("description") or None,
        state=IssueState(value.get("state") or IssueState.OPEN),
        due_on=value.get("due_on") or None,
        url=value.get("url") or "",
    )


def _locate_summary(text: str, block: str) -> tuple[int, int] | None:
    """Span of ``block`` where it ends the document or precedes the comments rule."""
    start = text.find(block)
    while start != -1:
        end = start + len(block)
        tail = text[end:]
        if not tail.strip() or tail.startswith("\n\n" + COMMENTS_MARKER):
            return start, end
        start = text.find(block, start + 1)
    return None


def _split_content(content: str, summary: str) -> tuple[str | None, str]:
    """Split the rendered body into (issue body, comments section).

    The body ends at the rule introducing ``summary``, the block the front
    matter implies. A rule followed by some other ``**Author:**`` line is
    part of the body. Documents whose summary was edited by hand fall back
    to the first ``**Author:**`` rule.
    """
    text = content.strip()
    if text.startswith("# "):
        _, _, text = text.partition("\n")

    span = _locate_summary(text, RULE + summary)
    if span is None:
        start = text.find(SUMMARY_MARKER)
        span = (start, start + len(SUMMARY_MARKER)) if start != -1 else None

    if span is None:
        body, comments = text, ""
    else:
        body = text[: span[0]]
        rest = text[span[1] :]
        comments_at = rest.find(COMMENTS_MARKER)
        comments = rest[comments_at + len(COMMENTS_MARKER) :] if comments_at != -1 else ""

    body = body.strip()
    return (body or None), comments


def _parse_comments(section: str) -> list[Comment]:
    comments: list[Comment] = []
    matches = list(COMMENT_HEADING.finditer(section))
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(section)
        login, created_at = match.group(1), match.group(2)
        comments.append(
            Comment(
                user=User(login=login),
                body=section[match.end() : end].strip(),
                created_at=created_at,
                updated_at=created_at,
            )
        )
    return comments


def _header(data: dict[str, Any]) -> Issue:
    """The issue as described by front matter alone (no body, no comments)."""
    return Issue(
        id=data["id"],
        number=data["number"],
        title=data["title"],
        state=data["state"],
        created_at=data["created_at"],
        updated_at=data["updated_at"],
        closed_at=data.get("closed_at") or None,
        author=_user(data["author"]),
        assignees=[_user(a) for a in data.get("assignees") or []],
        labels=[_label(label) for label in data.get("labels") or []],
        milestone=_milestone(data.get("milestone")),
        url=data.get("url") or "",
        html_url=data.get("html_url") or "",
    )


def from_document(text: str) -> Issue:
    """Rebuild an issue from a document produced by ``to_document``.

    Only headings inside the ``## Comments`` section become comments, so a
    ``### @name - date`` line inside the issue body stays part of the body.

    Raises:
        StorageError: If the front matter is missing, malformed or incomplete
    """
    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as e:
        raise StorageError(f"Invalid front matter: {e}") from e

    data = post.metadata
    if not data:
        raise StorageError("Document has no front matter")

    try:
        header = _header(data)
    except (KeyError, TypeError, AttributeError, ValueError, ValidationError) as e:
        raise StorageError(f"Invalid issue document: {e}") from e

    body, comments_section = _split_content(post.content, _summary(header))
    comments = _parse_comments(comments_section)
    return header.model_copy(update={"body": body, "comments": comments or None})
