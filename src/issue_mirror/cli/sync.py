"""Sync commands for Issue Mirror."""

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from issue_mirror.cli.common import (
    OutputFormatOption,
    PathArgument,
    RepoOption,
    StorageDirOption,
    build_sync_options,
    console,
    ensure_allowed,
    resolve_repository,
    resolve_storage_dir,
    run_async_command,
)
from issue_mirror.config import get_settings
from issue_mirror.github import GitHubClient
from issue_mirror.schemas import OutputFormat, SyncPeriod, SyncStrategy
from issue_mirror.storage import IssueStore
from issue_mirror.sync import SyncContext, SyncEngine, SyncProgress, SyncResult


def _print_result(result: SyncResult) -> None:
    """Print a sync result as text."""
    if result.cancelled:
        console.print("[yellow]Sync cancelled[/yellow]")
    elif result.success:
        console.print("[green]✓[/green] Sync completed")
    else:
        console.print("[red]✗[/red] Sync failed")

    if result.not_modified:
        console.print("  Remote reported no changes since the last sync")
    console.print(f"  Written: {result.synced_count}")
    console.print(f"  Skipped (unchanged): {result.skipped_count}")
    if result.error_count:
        console.print(f"  [red]Errors: {result.error_count}[/red]")
        for error in result.errors[:10]:
            console.print(f"    {error}")
        if result.error_count > 10:
            console.print(f"    ... and {result.error_count - 10} more")
    if result.has_more:
        console.print("  [dim]More issues match; raise --max to mirror them[/dim]")
    console.print(f"  Duration: {result.duration / 1000:.2f}s")


def sync_issues(
    path: PathArgument = Path("."),
    repo: RepoOption = None,
    strategy: SyncStrategy | None = typer.Option(  # noqa: B008
        None,
        "--strategy",
        help="Sync strategy (default: SYNC__SYNC_STRATEGY)",
    ),
    max_issues: int | None = typer.Option(
        None,
        "--max",
        "-m",
        min=1,
        help="Maximum number of issues to fetch",
    ),
    period: SyncPeriod | None = typer.Option(  # noqa: B008
        None,
        "--period",
        "-p",
        help="How far back to look when no checkpoint exists",
    ),
    include_closed: bool | None = typer.Option(
        None,
        "--closed/--open-only",
        help="Include closed issues",
    ),
    labels: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--label",
        "-l",
        help="Only mirror issues carrying this label (repeatable)",
    ),
    milestones: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--milestone",
        help="Only mirror issues in this milestone (repeatable)",
    ),
    storage_dir: StorageDirOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Mirror a repository's issues into the local store.

    Examples:
        issue-mirror sync
        issue-mirror sync ~/src/hello-world --strategy full
        issue-mirror sync --repo octo/hello-world --closed --max 500
        issue-mirror sync --label bug --label regression --format json
    """
    repository = resolve_repository(path, repo)
    ensure_allowed(repository)
    options = build_sync_options(
        strategy=strategy,
        max_issues=max_issues,
        period=period,
        include_closed=include_closed,
        labels=labels,
        milestones=milestones,
    )
    store = IssueStore(resolve_storage_dir(path, storage_dir))

    async def _sync() -> SyncResult:
        async with GitHubClient() as client:
            engine = SyncEngine(client, store)
            if output_format == OutputFormat.JSON:
                return await engine.sync_with_strategy(repository, options)

            with Progress(
                TextColumn("[bold]{task.description}"),
                BarColumn(bar_width=40),
                MofNCompleteColumn(),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Starting...", total=None)

                def on_progress(update: SyncProgress) -> None:
                    progress.update(
                        task,
                        description=update.message,
                        total=update.total or None,
                        completed=update.current,
                    )

                return await engine.sync_with_strategy(repository, options, on_progress)

    if output_format == OutputFormat.TEXT:
        console.print(
            f"Syncing [bold]{repository.full_name}[/bold] "
            f"({options.sync_strategy.value}) into {store.storage_dir}"
        )

    result = run_async_command(_sync(), error_prefix="Sync failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result.to_dict()))
    else:
        _print_result(result)

    if not result.success:
        raise typer.Exit(1)


def sync_issue(
    path: PathArgument,
    issue_number: int = typer.Argument(
        ...,
        min=1,
        help="Issue number to fetch with all comments",
    ),
    repo: RepoOption = None,
    storage_dir: StorageDirOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Fetch one issue with its comments and write it immediately.

    Examples:
        issue-mirror issue . 42
        issue-mirror issue . 42 --format json
    """
    repository = resolve_repository(path, repo)
    ensure_allowed(repository)
    store = IssueStore(resolve_storage_dir(path, storage_dir))

    async def _sync() -> dict[str, Any]:
        async with GitHubClient() as client:
            engine = SyncEngine(client, store)
            issue = await engine.sync_issue_details(repository, issue_number)
            return {
                "number": issue.number,
                "title": issue.title,
                "state": issue.state.value,
                "comments": len(issue.comments or []),
                "path": str(store.issue_path(issue.number)),
            }

    result = run_async_command(_sync(), error_prefix="Issue sync failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
    else:
        console.print(f"[green]✓[/green] #{result['number']} {result['title']}")
        console.print(f"  State: {result['state']}")
        console.print(f"  Comments: {result['comments']}")
        console.print(f"  Saved to: {result['path']}")


def watch(
    path: PathArgument = Path("."),
    repo: RepoOption = None,
    interval: int | None = typer.Option(
        None,
        "--interval",
        "-i",
        min=60,
        help="Seconds between syncs (default: SYNC__AUTO_SYNC_INTERVAL_SECONDS)",
    ),
    storage_dir: StorageDirOption = None,
) -> None:
    """Keep the mirror up to date by syncing periodically until interrupted.

    Examples:
        issue-mirror watch
        issue-mirror watch --interval 600
    """
    repository = resolve_repository(path, repo)
    ensure_allowed(repository)
    options = build_sync_options()
    store = IssueStore(resolve_storage_dir(path, storage_dir))
    interval_seconds = interval or get_settings().sync.auto_sync_interval_seconds

    def on_progress(update: SyncProgress) -> None:
        if update.total and update.current == update.total:
            console.print(f"[dim]{update.message}[/dim]")

    async def _watch() -> None:
        async with GitHubClient() as client:
            context = SyncContext(
                SyncEngine(client, store), repository, options, on_progress=on_progress
            )
            await context.start_auto_sync(interval_seconds, run_immediately=True)
            try:
                await asyncio.Event().wait()
            finally:
                await context.close()

    console.print(
        f"Watching [bold]{repository.full_name}[/bold] every {interval_seconds}s "
        "(Ctrl+C to stop)"
    )
    try:
        run_async_command(_watch(), error_prefix="Watch failed")
    except KeyboardInterrupt:
        console.print("Stopped")
