"""Local storage for mirrored issues.

This module provides:
- IssueStore: One Markdown document per issue plus the sync checkpoint
- BatchSaveResult: Per-issue outcome of save_issues
- markdown: The document codec (to_document, from_document, content_hash)
"""

from . import markdown
from .exceptions import StorageError
from .issue_store import BatchSaveResult, IssueStore
from .markdown import content_hash, from_document, to_document

__all__ = [
    "BatchSaveResult",
    "IssueStore",
    "StorageError",
    "content_hash",
    "from_document",
    "markdown",
    "to_document",
]
