"""History command for viewing past upgrades.

This module provides the `wupctl history` command for viewing the
recorded upgrade and rollback attempts.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from wupctl.core.state import StateManager
from wupctl.models.history import HistoryActionType, HistoryEntry
from wupctl.utils.formatting import console, print_info

app = typer.Typer(
    name="history",
    help="View history of package upgrades.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    since: Annotated[
        str | None,
        typer.Option(
            "--since",
            help="Show entries since date (YYYY-MM-DD).",
        ),
    ] = None,
    failed_only: Annotated[
        bool,
        typer.Option(
            "--failed",
            help="Show failed attempts only.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show history of package upgrades.

    Every upgrade attempt is recorded, including failures, together with
    rollbacks performed by `wupctl undo`.

    Examples:
        wupctl history              # Show last 20 entries
        wupctl history -n 50        # Show last 50 entries
        wupctl history --since 2026-01-01
        wupctl history --failed     # Failed attempts only
        wupctl history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    state = StateManager()
    entries = state.get_history()

    if since:
        entries = _filter_since(entries, since)
    if failed_only:
        entries = [e for e in entries if not e.success]
    entries = entries[:limit]

    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        _print_json(entries)
    else:
        _print_table(entries)


def _filter_since(entries: list[HistoryEntry], since: str) -> list[HistoryEntry]:
    """Keep entries recorded at or after a date.

    Args:
        entries: Entries to filter.
        since: ISO date or datetime. Naive values compare by day.

    Returns:
        Filtered entries.

    Raises:
        typer.Exit: If the date cannot be parsed.
    """
    try:
        since_parsed = datetime.fromisoformat(since)
    except ValueError:
        typer.echo(f"Invalid date format: {since}. Use YYYY-MM-DD.", err=True)
        raise typer.Exit(code=1) from None

    if since_parsed.tzinfo is None:
        since_date = since_parsed.strftime("%Y-%m-%d")
        return [e for e in entries if e.timestamp[:10] >= since_date]

    return [
        e
        for e in entries
        if datetime.fromisoformat(e.timestamp.replace("Z", "+00:00")) >= since_parsed
    ]


def _print_table(entries: list[HistoryEntry]) -> None:
    """Print history as Rich table.

    Args:
        entries: List of history entries to display.
    """
    table = Table(title="Update History", header_style="bold_header", border_style="border")
    table.add_column("ID", style="muted")
    table.add_column("Timestamp", style="info")
    table.add_column("Action")
    table.add_column("Source")
    table.add_column("Package", no_wrap=True)
    table.add_column("Version")
    table.add_column("Result")
    table.add_column("Undo?")

    for entry in entries:
        action = entry.action_type.value
        if entry.action_type == HistoryActionType.ROLLBACK:
            action = f"[warning]{action}[/]"

        if entry.success:
            result = "[success]OK[/]"
        else:
            result = f"[error]FAIL ({entry.exit_code})[/]"

        table.add_row(
            entry.id[:8],
            _format_timestamp(entry.timestamp),
            action,
            entry.source.value,
            escape(entry.package_id),
            f"{escape(entry.from_version or '?')} -> {escape(entry.to_version)}",
            result,
            "[success]Yes[/]" if entry.reversible else "[muted]No[/]",
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format ISO timestamp for display.

    Args:
        iso_timestamp: ISO format timestamp string.

    Returns:
        Formatted timestamp string (YYYY-MM-DD HH:MM).
    """
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")


def _print_json(entries: list[HistoryEntry]) -> None:
    """Print history as JSON for scripting."""
    output = [entry.to_dict() for entry in entries]
    console.print_json(json.dumps(output))
