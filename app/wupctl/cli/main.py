"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from wupctl import __version__
from wupctl.cli.commands import check, config, history, undo, update
from wupctl.core.logs import configure_logging
from wupctl.utils.formatting import err_console, print_error

# Create main Typer app
app = typer.Typer(
    name="wupctl",
    help="Update Windows software from Winget, Chocolatey and the Microsoft Store.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"wupctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Append a transcript of this run to a file.",
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """wupctl - Keep Windows software up to date.

    Checks Winget, Chocolatey and the Microsoft Store for available
    updates and installs them one package at a time.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["log_file"] = log_file

    try:
        configure_logging(err_console, verbose=verbose, quiet=quiet, log_file=log_file)
    except OSError as e:
        print_error(f"Cannot open log file {log_file}: {e}")
        raise typer.Exit(code=1) from e


# Register commands
app.add_typer(check.app, name="check")
app.add_typer(update.app, name="update")
app.add_typer(history.app, name="history")
app.add_typer(undo.app, name="undo")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
