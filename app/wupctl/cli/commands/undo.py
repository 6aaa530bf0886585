"""Undo command for rolling back an upgrade.

This module provides the `wupctl undo` command, which reinstalls the
version a package had before a recorded upgrade.
"""

from typing import Annotated

import typer
from rich.markup import escape

from wupctl.core.executor import get_operator
from wupctl.core.state import StateManager
from wupctl.models.history import HistoryEntry
from wupctl.operators.base import ProcessExecutionError
from wupctl.scanners.base import SourceUnavailableError
from wupctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    name="undo",
    help="Roll back the last reversible upgrade.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def undo(
    ctx: typer.Context,
    entry_id: Annotated[
        str | None,
        typer.Option(
            "--id",
            help="History entry ID (or unique prefix) to roll back.",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be rolled back without executing.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Roll back an upgrade by reinstalling the previous version.

    Without --id the most recent successful upgrade that has not been
    rolled back yet is used. Upgrades from an unknown version cannot be
    rolled back.

    Examples:
        wupctl undo                  # Undo with confirmation
        wupctl undo --dry-run        # Preview only
        wupctl undo --id 3f2a9c -y   # Specific entry, no prompt
    """
    if ctx.invoked_subcommand is not None:
        return

    state = StateManager()
    entry = _select_entry(state, entry_id)

    _show_undo_preview(entry)

    if dry_run:
        print_info("[dry-run] No changes made.")
        return

    if not yes:
        confirm = typer.confirm("Do you want to roll back this upgrade?")
        if not confirm:
            print_info("Cancelled.")
            return

    operator = get_operator(entry.source)
    try:
        outcome = operator.install_version(
            entry.package_id, entry.from_version, current_version=entry.to_version
        )
    except (SourceUnavailableError, ProcessExecutionError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    try:
        state.record_rollback(entry, outcome)
    except (OSError, RuntimeError) as e:
        print_error(f"Rollback ran but could not be recorded: {e}")

    if outcome.success:
        print_success(f"Rolled back {entry.package_id} to {entry.from_version}.")
        return

    print_error(f"{outcome.error_line}. Check the output below.")
    if outcome.error_output:
        console.print(f"[muted]{escape(outcome.error_output)}[/muted]")
    raise typer.Exit(code=1)


def _select_entry(state: StateManager, entry_id: str | None) -> HistoryEntry:
    """Pick the history entry to roll back.

    Raises:
        typer.Exit: With code 0 if nothing is reversible, 1 for a bad --id.
    """
    if entry_id is None:
        entry = state.get_last_reversible()
        if entry is None:
            print_info("No reversible upgrades in history.")
            raise typer.Exit(code=0)
        return entry

    entry = state.get_entry_by_id(entry_id)
    if entry is None:
        print_error(f"No unique history entry matches '{entry_id}'.")
        raise typer.Exit(code=1)
    if not entry.reversible or entry.id in state.get_reversed_entry_ids():
        print_error(f"Entry {entry.id[:8]} cannot be rolled back.")
        raise typer.Exit(code=1)
    return entry


def _show_undo_preview(entry: HistoryEntry) -> None:
    """Display what the rollback will do.

    Args:
        entry: The history entry to preview.
    """
    console.print(f"\n[bold]Roll back: {escape(entry.package_id)}[/bold]")
    console.print(f"  ID: {entry.id[:8]}")
    console.print(f"  Date: {entry.timestamp}")
    console.print(f"  Source: {entry.source.label}")
    console.print(
        f"  Version: {escape(entry.to_version)} -> [version_new]{escape(entry.from_version)}[/]"
    )
    console.print()
