"""GitHub API commands."""

import json
from typing import Any

from rich.table import Table

from issue_mirror.cli.common import OutputFormatOption, console, run_async_command
from issue_mirror.config import get_settings
from issue_mirror.github import GitHubClient, RateLimitInfo, RateLimitStatus
from issue_mirror.schemas import OutputFormat


def _get_status_style(status: RateLimitStatus) -> str:
    """Get rich style for status."""
    match status:
        case RateLimitStatus.HEALTHY:
            return "[green]HEALTHY[/green]"
        case RateLimitStatus.WARNING:
            return "[yellow]WARNING[/yellow]"
        case RateLimitStatus.CRITICAL:
            return "[red]CRITICAL[/red]"
        case RateLimitStatus.EXHAUSTED:
            return "[bold red]EXHAUSTED[/bold red]"
        case _:
            return str(status)


def _format_time_remaining(seconds: int) -> str:
    """Format seconds as human-readable time."""
    if seconds <= 0:
        return "Now"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def show_rate_limit(output_format: OutputFormatOption = OutputFormat.TEXT) -> None:
    """Show the current core rate limit (does not consume quota).

    Examples:
        issue-mirror rate-limit
        issue-mirror rate-limit --format json
    """

    async def _check() -> RateLimitInfo:
        async with GitHubClient() as client:
            return await client.get_rate_limit()

    info = run_async_command(_check(), error_prefix="Rate limit check failed")
    status = info.get_status(get_settings().rate_limit)

    if output_format == OutputFormat.JSON:
        data: dict[str, Any] = info.model_dump(mode="json")
        data["status"] = status.value
        data["seconds_until_reset"] = info.seconds_until_reset
        console.print_json(json.dumps(data))
        return

    table = Table(title="GitHub API Rate Limit")
    table.add_column("Status")
    table.add_column("Remaining", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Remaining %", justify="right")
    table.add_column("Resets In", justify="right")
    table.add_row(
        _get_status_style(status),
        str(info.remaining),
        str(info.limit),
        f"{info.remaining_percent:.1f}%",
        _format_time_remaining(info.seconds_until_reset),
    )
    console.print(table)

    if status == RateLimitStatus.EXHAUSTED:
        console.print(
            f"\n[red]Rate limit exhausted![/red] "
            f"Wait {_format_time_remaining(info.seconds_until_reset)} before syncing."
        )
    elif status == RateLimitStatus.CRITICAL:
        console.print(
            "\n[yellow]Recommendation:[/yellow] Rate limit is low. "
            "Consider waiting before running a full sync."
        )
