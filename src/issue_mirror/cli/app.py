"""Main CLI application for Issue Mirror."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from issue_mirror import __version__
from issue_mirror.cli import github as github_cmd
from issue_mirror.cli import issues as issues_cmd
from issue_mirror.cli import sync as sync_cmd
from issue_mirror.config import get_settings
from issue_mirror.logging import setup_logging

app = typer.Typer(
    name="issue-mirror",
    help="Mirror a GitHub repository's issues into local Markdown files.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"issue-mirror version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """Issue Mirror - Keep a local Markdown copy of GitHub issues."""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


app.command("sync")(sync_cmd.sync_issues)
app.command("issue")(sync_cmd.sync_issue)
app.command("watch")(sync_cmd.watch)
app.command("list")(issues_cmd.list_issues)
app.command("status")(issues_cmd.show_status)
app.command("rate-limit")(github_cmd.show_rate_limit)


if __name__ == "__main__":
    app()
