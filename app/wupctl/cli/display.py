"""Shared Rich display functions for records, outcomes and summaries.

Provides reusable table builders and summary printers for the `check`
and `update` commands.
"""

from collections.abc import Sequence

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from wupctl.models.outcome import SourceSummary, UpgradeOutcome
from wupctl.models.package import PackageRecord
from wupctl.models.run_result import RunResult
from wupctl.utils.formatting import (
    console,
    create_records_table,
    format_record_row,
    format_status,
    print_success,
)

# Lines of captured output shown per failed package
FAILURE_OUTPUT_LINES = 15


def print_records(records: Sequence[PackageRecord], title: str = "Available Updates") -> None:
    """Print upgradeable records as a table."""
    table = create_records_table(title)
    for record in records:
        table.add_row(*format_record_row(record))
    console.print(table)


def create_outcomes_table(outcomes: Sequence[UpgradeOutcome]) -> Table:
    """Create a Rich table displaying upgrade outcomes.

    Successful upgrades show "OK"; failed ones show "FAIL" with the exit
    code of the package manager.

    Args:
        outcomes: Outcomes to display, in processing order.

    Returns:
        Rich Table configured for outcome display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Source", width=10)
    table.add_column("Package", no_wrap=True)
    table.add_column("Version")
    table.add_column("Time", justify="right")

    for outcome in outcomes:
        if outcome.success:
            status = "[success]OK[/success]"
            version = f"{escape(outcome.from_version)} -> [version_new]{escape(outcome.to_version)}[/]"
        else:
            status = "[error]FAIL[/error]"
            version = f"[muted]exit code {outcome.exit_code}[/muted]"

        table.add_row(
            status,
            outcome.source.value,
            escape(outcome.package_id),
            version,
            f"[muted]{outcome.duration_seconds:.1f}s[/muted]",
        )

    return table


def create_summary_table(summaries: Sequence[SourceSummary]) -> Table:
    """Create a Rich table with one row per source.

    Args:
        summaries: Source summaries in processing order.

    Returns:
        Rich Table configured for summary display.
    """
    table = Table(
        title="Summary",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Source", no_wrap=True)
    table.add_column("Status")
    table.add_column("Updated", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Details", style="muted")

    for summary in summaries:
        details: list[str] = []
        if summary.message:
            details.append(summary.message)
        if summary.skipped:
            details.append(f"pinned: {', '.join(summary.skipped)}")

        table.add_row(
            summary.source.label,
            format_status(summary.status),
            str(summary.updated_count),
            str(len(summary.errors)) if summary.errors else "",
            escape("; ".join(details)),
        )

    return table


def print_failures(outcomes: Sequence[UpgradeOutcome]) -> None:
    """Print a report for every failed upgrade.

    Shows the package identifier, exit code and the tail of the captured
    package manager output, so failures can be diagnosed without
    re-running.

    Args:
        outcomes: Outcomes of a run. Successful ones are ignored.
    """
    for outcome in outcomes:
        if outcome.success:
            continue

        lines = (outcome.error_output or "").splitlines()
        if len(lines) > FAILURE_OUTPUT_LINES:
            omitted = len(lines) - FAILURE_OUTPUT_LINES
            lines = [f"... ({omitted} earlier lines omitted)", *lines[-FAILURE_OUTPUT_LINES:]]
        body = escape("\n".join(lines)) if lines else "[muted]no output captured[/muted]"

        console.print(
            Panel(
                body,
                title=f"[error]{escape(outcome.package_id)}[/] exit code {outcome.exit_code}",
                title_align="left",
                border_style="error",
            )
        )


def print_run_summary(result: RunResult) -> None:
    """Print the summary table and a one-line verdict for a run.

    Args:
        result: Result of the run.
    """
    console.print(create_summary_table(result.summaries))

    failed = sum(1 for outcome in result.outcomes if outcome.failed)
    if failed == 0 and not result.has_failures:
        print_success(f"{result.updated_count} package(s) updated.")
    else:
        console.print(
            f"\n[success]{result.updated_count} updated[/success], [error]{failed} failed[/error]"
        )
