"""Shared types and utilities for CLI commands.

This module provides common option types and helper functions used
across multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from wupctl.core.config import ConfigError, UpdaterConfig, load_config_or_default
from wupctl.core.logs import configure_logging
from wupctl.core.paths import get_log_path
from wupctl.models.package import PackageSource
from wupctl.utils.formatting import err_console, print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


WingetOption = Annotated[
    bool | None,
    typer.Option("--winget/--no-winget", help="Include or skip Winget (overrides config)."),
]
ChocolateyOption = Annotated[
    bool | None,
    typer.Option(
        "--chocolatey/--no-chocolatey", help="Include or skip Chocolatey (overrides config)."
    ),
]
StoreOption = Annotated[
    bool | None,
    typer.Option("--store/--no-store", help="Include or skip the Microsoft Store (overrides config)."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to config file (default: user config dir).",
        dir_okay=False,
    ),
]


def load_cli_config(config_path: Path | None) -> UpdaterConfig:
    """Load configuration for a command, exiting on errors.

    Args:
        config_path: Explicit config path, or None for the default location.

    Returns:
        Validated configuration (defaults when no file exists).

    Raises:
        typer.Exit: If the config file is missing or invalid.
    """
    try:
        return load_config_or_default(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def apply_source_toggles(
    config: UpdaterConfig,
    winget: bool | None = None,
    chocolatey: bool | None = None,
    store: bool | None = None,
) -> UpdaterConfig:
    """Return a copy of the config with CLI source toggles applied.

    A toggle left at None keeps the configured value.

    Args:
        config: Loaded configuration.
        winget: --winget/--no-winget value.
        chocolatey: --chocolatey/--no-chocolatey value.
        store: --store/--no-store value.

    Returns:
        Updated configuration. The input is not modified.
    """
    toggles = {
        PackageSource.WINGET: winget,
        PackageSource.CHOCOLATEY: chocolatey,
        PackageSource.STORE: store,
    }
    sources = config.sources
    for source, enabled in toggles.items():
        if enabled is None:
            continue
        updated = sources.get(source).model_copy(update={"enabled": enabled})
        sources = sources.model_copy(update={source.value: updated})
    return config.model_copy(update={"sources": sources})


def enabled_sources(config: UpdaterConfig) -> list[PackageSource]:
    """List the sources enabled in a configuration."""
    return [source for source in PackageSource if config.is_enabled(source)]


def setup_run_logging(ctx: typer.Context, config: UpdaterConfig) -> None:
    """Reconfigure logging once the config of a run is known.

    --log-file always wins; otherwise the configured transcript is used
    when enabled.

    Args:
        ctx: Typer context carrying the global options.
        config: Configuration of the run.
    """
    options = ctx.obj or {}
    log_file: Path | None = options.get("log_file")
    if log_file is None and config.logging.enabled:
        log_file = config.logging.file or get_log_path()

    try:
        configure_logging(
            err_console,
            verbose=options.get("verbose", False),
            quiet=options.get("quiet", False),
            log_file=log_file,
        )
    except OSError as e:
        print_error(f"Cannot open log file {log_file}: {e}")
        raise typer.Exit(code=1) from e
