"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from wupctl.core.theme import get_theme

if TYPE_CHECKING:
    from wupctl.models.outcome import SourceStatus
    from wupctl.models.package import PackageRecord


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_records_table(title: str = "Available Updates") -> Table:
    """Create a pre-configured table for upgradeable packages.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for package display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    table.add_column("Source", style="muted", width=10)
    table.add_column("Package", no_wrap=True)
    table.add_column("Id", style="muted", overflow="fold")
    table.add_column("Current", style="muted")
    table.add_column("Available")
    table.add_column("", width=6)
    return table


def format_record_row(record: PackageRecord) -> tuple[str, str, str, str, str, str]:
    """Format a record as a table row with styling.

    Pinned packages are marked and their available version is muted,
    since they will not be upgraded.

    Args:
        record: The package record to format.

    Returns:
        Tuple of (source, name, id, current, available, marker) with Rich markup.
    """
    if record.pinned:
        available = f"[muted]{escape(record.available_version)}[/]"
        marker = "[pinned]pinned[/]"
    else:
        available = f"[version_new]{escape(record.available_version)}[/]"
        marker = ""

    return (
        record.source.value,
        f"[text]{escape(record.name)}[/]",
        escape(record.id),
        escape(record.current_version),
        available,
        marker,
    )


def format_status(status: SourceStatus) -> str:
    """Format a source status with its theme style."""
    label = status.value.replace("_", " ")
    return f"[status.{status.value}]{label}[/]"


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
