"""Mock GitHub API response fixtures.

These fixtures represent realistic GitHub REST API responses for testing
schema parsing and conversion logic. Structure matches the GitHub REST API v3.

See: https://docs.github.com/en/rest/issues/issues
"""

from tests.conftest import JAN_10_ISO, JAN_12_ISO, JAN_15_ISO, JAN_16_ISO

# -----------------------------------------------------------------------------
# User Response
# -----------------------------------------------------------------------------
GITHUB_USER_RESPONSE = {
    "login": "octocat",
    "id": 583231,
    "avatar_url": "https://avatars.githubusercontent.com/u/583231",
    "url": "https://api.github.com/users/octocat",
    "type": "User",
}

# -----------------------------------------------------------------------------
# Label / Milestone Responses
# -----------------------------------------------------------------------------
GITHUB_LABEL_RESPONSE = {
    "id": 208045946,
    "name": "bug",
    "color": "d73a4a",
    "description": "Something isn't working",
    "default": True,
}

GITHUB_MILESTONE_RESPONSE = {
    "id": 1002604,
    "number": 1,
    "title": "v1.0",
    "description": "Tracking milestone for version 1.0",
    "state": "open",
    "due_on": "2024-02-01T07:00:00Z",
    "url": "https://api.github.com/repos/octo/hello-world/milestones/1",
}

# -----------------------------------------------------------------------------
# Issue Responses
# -----------------------------------------------------------------------------
GITHUB_ISSUE_CLOSED_RESPONSE = {
    "id": 1,
    "number": 1347,
    "title": "Found a bug",
    "body": "I'm having a problem with this.",
    "state": "closed",
    "user": GITHUB_USER_RESPONSE,
    "assignees": [GITHUB_USER_RESPONSE],
    "labels": [GITHUB_LABEL_RESPONSE],
    "milestone": GITHUB_MILESTONE_RESPONSE,
    "comments": 1,
    "created_at": JAN_10_ISO,
    "updated_at": JAN_16_ISO,
    "closed_at": JAN_12_ISO,
    "url": "https://api.github.com/repos/octo/hello-world/issues/1347",
    "html_url": "https://github.com/octo/hello-world/issues/1347",
}

GITHUB_PULL_REQUEST_ITEM = {
    **GITHUB_ISSUE_CLOSED_RESPONSE,
    "id": 2,
    "number": 1348,
    "title": "Fix the bug",
    "pull_request": {
        "url": "https://api.github.com/repos/octo/hello-world/pulls/1348",
        "html_url": "https://github.com/octo/hello-world/pull/1348",
    },
}

# Deleted account: GitHub returns null for the user
GITHUB_ISSUE_GHOST_AUTHOR = {
    **GITHUB_ISSUE_CLOSED_RESPONSE,
    "user": None,
    "assignees": None,
    "milestone": None,
    "closed_at": None,
    "state": "open",
}

GITHUB_COMMENT_RESPONSE = {
    "id": 1,
    "user": GITHUB_USER_RESPONSE,
    "body": "Me too",
    "created_at": JAN_15_ISO,
    "updated_at": JAN_15_ISO,
    "url": "https://api.github.com/repos/octo/hello-world/issues/comments/1",
}
