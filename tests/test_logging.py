"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from loguru import logger

from issue_mirror.logging import (
    bind_issue,
    bind_repo,
    get_logger,
    reset_logging,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Generator[None, None, None]:
    """Reset loguru state before and after each test."""
    reset_logging()
    yield
    reset_logging()


class TestLevels:
    """Tests for level selection."""

    def test_info_hides_debug(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")

        get_logger("test").debug("hidden detail")
        get_logger("test").info("shown summary")

        err = capsys.readouterr().err
        assert "shown summary" in err
        assert "hidden detail" not in err

    def test_verbose_takes_precedence(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="WARNING", verbose=True, quiet=True)

        get_logger("test").debug("debug message")

        assert "debug message" in capsys.readouterr().err

    def test_quiet_suppresses_info(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="DEBUG", quiet=True)

        get_logger("test").info("progress chatter")
        get_logger("test").warning("rate limit low")

        err = capsys.readouterr().err
        assert "progress chatter" not in err
        assert "rate limit low" in err

    def test_setup_replaces_handlers(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")
        setup_logging(level="INFO")

        get_logger("test").info("once")

        assert capsys.readouterr().err.count("once") == 1


class TestRecordLabels:
    """Tests for source and repository labels."""

    def test_source_from_get_logger(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")

        get_logger("issue_mirror.storage").info("Saved issue")

        assert "issue_mirror.storage - Saved issue" in capsys.readouterr().err

    def test_repo_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")

        bind_repo("octo", "hello-world").info("Processing 3 issues")

        assert "sync [octo/hello-world] - Processing 3 issues" in capsys.readouterr().err

    def test_issue_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")

        bind_issue("octo", "hello-world", 42).warning("Comments unavailable")

        assert "[octo/hello-world#42] - Comments unavailable" in capsys.readouterr().err

    def test_unbound_logger_uses_module_name(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")

        logger.info("bare record")

        assert f"{__name__} - bare record" in capsys.readouterr().err


class TestFileSink:
    """Tests for the optional log file."""

    def test_file_records_debug(self, tmp_path: Path) -> None:
        log_file = tmp_path / "mirror.log"
        setup_logging(level="WARNING", log_file=log_file)

        bind_issue("octo", "hello-world", 7).debug("Fetched details")
        logger.complete()

        content = log_file.read_text()
        assert "Fetched details" in content
        assert "[octo/hello-world#7]" in content

    def test_serialized_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "mirror.log"
        setup_logging(level="INFO", log_file=log_file, serialize=True)

        bind_repo("octo", "hello-world").info("Sync completed")
        logger.complete()

        record = json.loads(log_file.read_text().splitlines()[0])["record"]
        assert record["message"] == "Sync completed"
        assert record["extra"]["repo"] == "octo/hello-world"


class TestStdlibInterception:
    """Tests for routing stdlib loggers through loguru."""

    def test_stdlib_record_forwarded(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")

        logging.getLogger("some.library").warning("Hello from stdlib")

        assert "some.library - Hello from stdlib" in capsys.readouterr().err

    def test_http_loggers_quiet_unless_debug(self) -> None:
        setup_logging(level="INFO")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_http_loggers_verbose_in_debug(self) -> None:
        setup_logging(level="INFO", verbose=True)

        assert logging.getLogger("httpx").level == logging.DEBUG
        assert logging.getLogger("httpcore").level == logging.DEBUG
