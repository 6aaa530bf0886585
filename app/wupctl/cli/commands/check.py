"""Check command implementation.

Lists available updates from every enabled source without installing
anything.
"""

import json
from typing import Annotated

import typer

from wupctl.cli.display import create_summary_table, print_records
from wupctl.cli.types import (
    ChocolateyOption,
    ConfigOption,
    OutputFormat,
    StoreOption,
    WingetOption,
    apply_source_toggles,
    enabled_sources,
    load_cli_config,
    setup_run_logging,
)
from wupctl.core.pipeline import UpdatePipeline
from wupctl.models.run_result import RunResult
from wupctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="List available updates without installing them.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def check(
    ctx: typer.Context,
    winget: WingetOption = None,
    chocolatey: ChocolateyOption = None,
    store: StoreOption = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    config_path: ConfigOption = None,
) -> None:
    """List packages with updates available.

    Nothing is installed, and the Microsoft Store update scan is never
    triggered by this command.

    Examples:
        wupctl check                  # All enabled sources
        wupctl check --no-store       # Skip the Microsoft Store
        wupctl check --format json    # Machine-readable output
    """
    if ctx.invoked_subcommand is not None:
        return

    config = apply_source_toggles(load_cli_config(config_path), winget, chocolatey, store)
    setup_run_logging(ctx, config)

    if not enabled_sources(config):
        print_error("All sources are disabled.")
        raise typer.Exit(code=1)

    pipeline = UpdatePipeline(config, list_only=True)

    if output_format == OutputFormat.JSON:
        result = pipeline.run()
        console.print_json(json.dumps(result.to_dict()))
        return

    with console.status("[info]Checking for updates...[/]") as status:
        result = pipeline.run(
            on_source=lambda source: status.update(f"[info]Checking {source.label}...[/]")
        )

    _print_check_result(result)


def _print_check_result(result: RunResult) -> None:
    """Display enumerated records and per-source status."""
    records = result.records
    if records:
        print_records(records)
    console.print(create_summary_table(result.summaries))

    upgradeable = [record for record in records if not record.pinned]
    if upgradeable:
        print_info(f"{len(upgradeable)} update(s) available. Run 'wupctl update' to install.")
    elif not result.has_failures:
        print_success("Everything is up to date.")
