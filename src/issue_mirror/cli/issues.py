"""Commands that read the local mirror without touching the network."""

import json
from pathlib import Path

import typer
from rich.table import Table

from issue_mirror.cli.common import (
    OutputFormatOption,
    PathArgument,
    StorageDirOption,
    console,
    resolve_storage_dir,
    run_async_command,
)
from issue_mirror.schemas import IssueState, OutputFormat
from issue_mirror.storage import IssueStore


def list_issues(
    path: PathArgument = Path("."),
    state: IssueState | None = typer.Option(  # noqa: B008
        None,
        "--state",
        help="Only show open or closed issues",
    ),
    label: str | None = typer.Option(
        None,
        "--label",
        "-l",
        help="Only show issues carrying this label",
    ),
    storage_dir: StorageDirOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List mirrored issues.

    Examples:
        issue-mirror list
        issue-mirror list --state open --label bug
    """
    store = IssueStore(resolve_storage_dir(path, storage_dir))
    issues = run_async_command(store.load_all_issues(), error_prefix="Failed to read mirror")

    if state is not None:
        issues = [i for i in issues if i.state == state]
    if label is not None:
        wanted = label.lower()
        issues = [i for i in issues if wanted in (name.lower() for name in i.label_names)]

    if output_format == OutputFormat.JSON:
        console.print_json(
            json.dumps(
                [
                    {
                        "number": i.number,
                        "title": i.title,
                        "state": i.state.value,
                        "updated_at": i.updated_at,
                        "labels": i.label_names,
                        "comments": len(i.comments or []),
                        "html_url": i.html_url,
                    }
                    for i in issues
                ]
            )
        )
        return

    if not issues:
        console.print(f"[dim]No mirrored issues in {store.storage_dir}[/dim]")
        return

    table = Table(title=f"Mirrored issues ({len(issues)})")
    table.add_column("#", justify="right", style="bold")
    table.add_column("State")
    table.add_column("Title")
    table.add_column("Labels")
    table.add_column("Comments", justify="right")
    table.add_column("Updated")
    for issue in issues:
        state_str = (
            "[green]open[/green]" if issue.state == IssueState.OPEN else "[magenta]closed[/magenta]"
        )
        table.add_row(
            str(issue.number),
            state_str,
            issue.title,
            ", ".join(issue.label_names),
            str(len(issue.comments or [])),
            issue.updated_at,
        )
    console.print(table)


def show_status(
    path: PathArgument = Path("."),
    storage_dir: StorageDirOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show the sync checkpoint and document count of the mirror.

    Examples:
        issue-mirror status
        issue-mirror status --format json
    """
    store = IssueStore(resolve_storage_dir(path, storage_dir))

    async def _status() -> dict[str, object]:
        state = await store.load_sync_state()
        issues = await store.load_all_issues()
        return {
            "storage_dir": str(store.storage_dir),
            "documents": len(issues),
            "open": sum(1 for i in issues if i.state == IssueState.OPEN),
            "closed": sum(1 for i in issues if i.state == IssueState.CLOSED),
            "last_sync_time": state.last_sync_time if state else None,
            "last_etag": state.last_etag if state else None,
            "synced_issue_ids": len(state.synced_issue_ids) if state else 0,
        }

    status = run_async_command(_status(), error_prefix="Failed to read mirror")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(status))
        return

    console.print(f"[bold]Mirror:[/bold] {status['storage_dir']}")
    console.print(
        f"  Documents: {status['documents']} "
        f"({status['open']} open, {status['closed']} closed)"
    )
    if status["last_sync_time"] is None:
        console.print("  [yellow]Never synced[/yellow]")
    else:
        console.print(f"  Last sync: {status['last_sync_time']}")
        console.print(f"  Tracked issue ids: {status['synced_issue_ids']}")
        if status["last_etag"]:
            console.print(f"  ETag: {status['last_etag']}")
