"""Tests for working-copy repository resolution."""

import pytest

from issue_mirror.repository import (
    get_remote_url,
    get_repository_info,
    is_git_repository,
    parse_remote_url,
)

GIT_CONFIG = """\
[core]
\trepositoryformatversion = 0
\tbare = false
[remote "upstream"]
\turl = git@github.com:upstream-org/hello-world.git
\tfetch = +refs/heads/*:refs/remotes/upstream/*
[remote "origin"]
\turl = {url}
\tfetch = +refs/heads/*:refs/remotes/origin/*
[branch "main"]
\tremote = origin
"""


def _make_working_copy(path, url=None):
    git_dir = path / ".git"
    git_dir.mkdir(parents=True)
    if url is not None:
        (git_dir / "config").write_text(GIT_CONFIG.format(url=url), encoding="utf-8")
    return path


class TestParseRemoteUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("git@github.com:octo/hello-world.git", ("octo", "hello-world")),
            ("git@github.com:octo/hello-world", ("octo", "hello-world")),
            ("https://github.com/octo/hello-world.git", ("octo", "hello-world")),
            ("https://github.com/octo/hello-world", ("octo", "hello-world")),
            ("https://github.com/octo/hello-world/", ("octo", "hello-world")),
            ("  https://github.com/octo/hello.world.git  ", ("octo", "hello.world")),
        ],
    )
    def test_github_remotes(self, url, expected):
        assert parse_remote_url(url) == expected

    @pytest.mark.parametrize(
        "url",
        [
            None,
            "",
            "   ",
            "https://gitlab.com/octo/hello-world.git",
            "git@bitbucket.org:octo/hello-world.git",
            "not a url",
        ],
    )
    def test_unrecognized(self, url):
        assert parse_remote_url(url) is None


class TestWorkingCopy:
    def test_is_git_repository(self, tmp_path):
        assert not is_git_repository(tmp_path)
        _make_working_copy(tmp_path)
        assert is_git_repository(tmp_path)

    def test_remote_url_reads_origin(self, tmp_path):
        _make_working_copy(tmp_path, "https://github.com/octo/hello-world.git")

        assert get_remote_url(tmp_path) == "https://github.com/octo/hello-world.git"

    def test_remote_url_strips_comment(self, tmp_path):
        _make_working_copy(tmp_path, "git@github.com:octo/hello-world.git # primary")

        assert get_remote_url(tmp_path) == "git@github.com:octo/hello-world.git"

    def test_missing_config(self, tmp_path):
        _make_working_copy(tmp_path)

        assert get_remote_url(tmp_path) is None

    def test_no_origin(self, tmp_path):
        _make_working_copy(tmp_path)
        (tmp_path / ".git" / "config").write_text("[core]\n\tbare = false\n", encoding="utf-8")

        assert get_remote_url(tmp_path) is None


class TestGetRepositoryInfo:
    def test_github_origin(self, tmp_path):
        _make_working_copy(tmp_path, "git@github.com:octo/hello-world.git")

        info = get_repository_info(tmp_path)

        assert info is not None
        assert info.owner == "octo"
        assert info.repo == "hello-world"
        assert info.remote_url == "git@github.com:octo/hello-world.git"
        assert info.full_name == "octo/hello-world"

    def test_not_a_repository(self, tmp_path):
        assert get_repository_info(tmp_path) is None

    def test_foreign_host(self, tmp_path):
        _make_working_copy(tmp_path, "https://gitlab.com/octo/hello-world.git")

        assert get_repository_info(tmp_path) is None

    def test_no_remote(self, tmp_path):
        _make_working_copy(tmp_path)

        assert get_repository_info(tmp_path) is None
