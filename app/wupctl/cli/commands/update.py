"""Update command implementation.

Enumerates available updates from every enabled source, then upgrades
them one package at a time.
"""

import logging
from typing import Annotated

import typer

from wupctl.cli.display import (
    create_outcomes_table,
    print_failures,
    print_records,
    print_run_summary,
)
from wupctl.cli.types import (
    ChocolateyOption,
    ConfigOption,
    StoreOption,
    WingetOption,
    apply_source_toggles,
    enabled_sources,
    load_cli_config,
    setup_run_logging,
)
from wupctl.core.config import UpdaterConfig
from wupctl.core.executor import record_outcomes_to_history
from wupctl.core.paths import get_reports_dir
from wupctl.core.pipeline import UpdatePipeline, pending_sources
from wupctl.core.report import ReportError, ReportFormat, write_report
from wupctl.core.restore import RestorePointError, create_restore_point
from wupctl.models.run_result import RunResult
from wupctl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Install available updates from Winget, Chocolatey and the Store.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def update(
    ctx: typer.Context,
    winget: WingetOption = None,
    chocolatey: ChocolateyOption = None,
    store: StoreOption = None,
    list_only: Annotated[
        bool,
        typer.Option(
            "--list-only",
            "-l",
            help="Only list available updates; install nothing.",
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
    report: Annotated[
        bool | None,
        typer.Option(
            "--report/--no-report",
            help="Write a run report (overrides config).",
        ),
    ] = None,
    report_format: Annotated[
        ReportFormat | None,
        typer.Option(
            "--report-format",
            help="Report format: json, csv or html.",
            case_sensitive=False,
        ),
    ] = None,
    restore_point: Annotated[
        bool | None,
        typer.Option(
            "--restore-point/--no-restore-point",
            help="Create a system restore point before upgrading (overrides config).",
        ),
    ] = None,
    config_path: ConfigOption = None,
) -> None:
    """Upgrade every package with an update available.

    Sources are processed in order: Winget, Chocolatey, Microsoft Store.
    A failing package or source never stops the others; the summary at
    the end shows what happened per source. Pinned Chocolatey packages
    are listed but never upgraded.

    Examples:
        wupctl update                    # Upgrade with confirmation
        wupctl update -y                 # Unattended
        wupctl update --list-only        # Enumerate only
        wupctl update --no-chocolatey    # Skip Chocolatey
        wupctl update --report --report-format csv
    """
    if ctx.invoked_subcommand is not None:
        return

    config = apply_source_toggles(load_cli_config(config_path), winget, chocolatey, store)
    setup_run_logging(ctx, config)

    if not enabled_sources(config):
        print_error("All sources are disabled.")
        raise typer.Exit(code=1)

    pipeline = UpdatePipeline(config, list_only=list_only)

    with console.status("[info]Checking for updates...[/]") as status:
        listing = pipeline.enumerate(
            on_source=lambda source: status.update(f"[info]Checking {source.label}...[/]")
        )

    if listing.records:
        print_records(listing.records)

    pending = pending_sources(listing)
    if list_only or not pending:
        print_run_summary(listing)
        if not list_only and not listing.has_failures:
            print_success("Everything is up to date.")
        _write_report(listing, config, report, report_format)
        return

    if not yes:
        names = ", ".join(source.label for source in pending)
        if not typer.confirm(f"\nInstall updates from {names}?", default=True):
            print_info("Aborted.")
            raise typer.Exit(code=0)

    _create_restore_point(config, restore_point)

    result = pipeline.upgrade(listing)

    if result.outcomes:
        console.print(create_outcomes_table(result.outcomes))
        print_failures(result.outcomes)

        written = record_outcomes_to_history(result.outcomes)
        if written:
            print_info(f"{written} upgrade(s) recorded to history.")

    print_run_summary(result)
    _write_report(result, config, report, report_format)


def _create_restore_point(config: UpdaterConfig, requested: bool | None) -> None:
    """Create the pre-update restore point when enabled.

    Raises:
        typer.Exit: If the restore point is required and fails.
    """
    settings = config.restore_point
    enabled = settings.enabled if requested is None else requested
    if not enabled:
        return

    try:
        with console.status("[info]Creating restore point...[/]"):
            create_restore_point(settings.description)
    except RestorePointError as e:
        if settings.required:
            print_error(f"Restore point required but not created: {e}")
            raise typer.Exit(code=1) from e
        print_warning(f"Continuing without restore point: {e}")
        return

    print_success("Restore point created.")


def _write_report(
    result: RunResult,
    config: UpdaterConfig,
    requested: bool | None,
    report_format: ReportFormat | None,
) -> None:
    """Write the run report when enabled.

    Report failures are warnings; the run itself already completed.
    """
    settings = config.report
    enabled = settings.enabled if requested is None else requested
    if not enabled:
        return

    fmt = report_format or settings.format
    directory = settings.directory or get_reports_dir()
    try:
        path = write_report(result, fmt, directory)
    except ReportError as e:
        logger.warning("Report not written: %s", e)
        print_warning(f"Could not write report: {e}")
        return

    print_info(f"Report written to {path}")
