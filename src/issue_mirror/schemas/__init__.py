"""Pydantic schemas for Issue Mirror.

This module provides the internal issue record, sync configuration and
checkpoint models, and GitHub API response parsing.
"""

from .enums import IssueState, OutputFormat, SyncPeriod, SyncStrategy
from .github_api import GitHubComment, GitHubIssue, GitHubLabel, GitHubMilestone, GitHubUser
from .issue import Comment, Issue, Label, Milestone, User
from .sync import RepositoryInfo, SyncOptions, SyncState, parse_repo_string

__all__ = [
    # Issue record
    "Comment",
    "Issue",
    "Label",
    "Milestone",
    "User",
    # GitHub API
    "GitHubComment",
    "GitHubIssue",
    "GitHubLabel",
    "GitHubMilestone",
    "GitHubUser",
    # Sync
    "RepositoryInfo",
    "SyncOptions",
    "SyncState",
    "parse_repo_string",
    # Enums
    "IssueState",
    "OutputFormat",
    "SyncPeriod",
    "SyncStrategy",
]
