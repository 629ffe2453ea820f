"""Resolve the GitHub repository a working copy points at.

Only ``origin`` is consulted, and only github.com remotes are recognized.
"""

import re
from pathlib import Path

from issue_mirror.logging import get_logger
from issue_mirror.schemas import RepositoryInfo

logger = get_logger(__name__)

SSH_REMOTE = re.compile(r"git@github\.com:([^/]+)/(.+?)(?:\.git)?$")
HTTPS_REMOTE = re.compile(r"https://github\.com/([^/]+)/([^/]+?)(?:\.git)?(?:/|$)")
ORIGIN_URL = re.compile(r'\[remote "origin"\][^\[]*?url\s*=\s*(.+?)(?:\n|$)', re.DOTALL)


def parse_remote_url(remote_url: str | None) -> tuple[str, str] | None:
    """Extract (owner, repo) from a github.com SSH or HTTPS remote URL.

    Examples:
        git@github.com:octo/hello-world.git -> ("octo", "hello-world")
        https://github.com/octo/hello-world -> ("octo", "hello-world")

    Returns:
        (owner, repo), or None for empty input or other hosts
    """
    if not remote_url or not remote_url.strip():
        return None
    remote_url = remote_url.strip()

    for pattern in (SSH_REMOTE, HTTPS_REMOTE):
        match = pattern.search(remote_url)
        if match:
            owner, repo = match.group(1), match.group(2)
            return owner, repo.removesuffix(".git")
    return None


def is_git_repository(path: Path | str) -> bool:
    """Whether ``path`` contains a ``.git`` directory."""
    return (Path(path) / ".git").is_dir()


def get_remote_url(path: Path | str) -> str | None:
    """Read the ``origin`` URL from ``.git/config`` (None if absent or unreadable)."""
    config_path = Path(path) / ".git" / "config"
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug("Cannot read {}: {}", config_path, e)
        return None

    match = ORIGIN_URL.search(content)
    if not match:
        return None
    # Inline comments are allowed in git config
    url = match.group(1).split("#", 1)[0].strip()
    return url or None


def get_repository_info(path: Path | str) -> RepositoryInfo | None:
    """Resolve owner/repo/remote URL for a working copy.

    Returns:
        RepositoryInfo, or None if ``path`` is not a git repository, has no
        origin remote, or the remote is not on github.com
    """
    if not is_git_repository(path):
        return None

    remote_url = get_remote_url(path)
    if remote_url is None:
        return None

    parsed = parse_remote_url(remote_url)
    if parsed is None:
        logger.debug("Remote {} is not a GitHub repository", remote_url)
        return None

    owner, repo = parsed
    return RepositoryInfo(owner=owner, repo=repo, remote_url=remote_url)
