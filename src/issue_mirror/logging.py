"""Loguru setup for the CLI and the sync engine.

Every record is labelled with a source (the module bound by ``get_logger``,
or the stdlib logger name for intercepted records) and, when bound, the
repository and issue it concerns.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CONSOLE_FORMAT = (
    "<dim>{time:HH:mm:ss}</dim> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[source]}</cyan>{extra[context]} - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[source]}:{function}:{line}{extra[context]} | {message}"
)

# Noisy transport loggers used by githubkit
_HTTP_LOGGERS = ("httpx", "httpcore")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records (httpx, httpcore) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _patch_record(record: Any) -> None:
    extra = record["extra"]
    extra["source"] = extra.get("name") or record["name"] or "?"
    repo = extra.get("repo")
    if repo is None:
        extra["context"] = ""
    elif "issue" in extra:
        extra["context"] = f" [{repo}#{extra['issue']}]"
    else:
        extra["context"] = f" [{repo}]"


def _effective_level(level: LogLevel, verbose: bool, quiet: bool) -> LogLevel:
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return level


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Replace loguru's handlers with the console (and optional file) sinks.

    ``verbose`` wins over ``quiet``; both win over ``level``. The file sink,
    when configured, always records DEBUG and above.
    """
    effective = _effective_level(level, verbose, quiet)

    logger.remove()
    logger.configure(patcher=_patch_record)
    logger.add(
        sys.stderr,
        level=effective,
        format=CONSOLE_FORMAT,
        colorize=None,
        backtrace=True,
        diagnose=False,
    )
    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    http_level = logging.DEBUG if effective in ("TRACE", "DEBUG") else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return logger


def get_logger(name: str) -> Logger:
    """Logger labelled with ``name`` (usually ``__name__``)."""
    return logger.bind(name=name)


def bind_repo(owner: str, repo: str) -> Logger:
    return logger.bind(name="sync", repo=f"{owner}/{repo}")


def bind_issue(owner: str, repo: str, issue_number: int) -> Logger:
    return logger.bind(name="sync", repo=f"{owner}/{repo}", issue=issue_number)


def reset_logging() -> None:
    """Drop every loguru handler; used between tests and CLI invocations."""
    logger.remove()
