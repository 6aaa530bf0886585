"""Config commands.

Provides commands to show the effective configuration, write a default
config file and print the config location.
"""

from typing import Annotated

import tomli_w
import typer
from rich.syntax import Syntax

from wupctl.cli.types import ConfigOption, load_cli_config
from wupctl.core.config import ConfigError, UpdaterConfig, save_config
from wupctl.core.paths import get_config_path
from wupctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize the wupctl configuration.",
    no_args_is_help=True,
)


@app.command()
def show(config_path: ConfigOption = None) -> None:
    """Print the effective configuration as TOML.

    Defaults are shown when no config file exists.
    """
    config = load_cli_config(config_path)
    text = tomli_w.dumps(config.model_dump(mode="json", exclude_none=True))
    console.print(Syntax(text, "toml", background_color="default"))


@app.command()
def init(
    config_path: ConfigOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = config_path or get_config_path()
    if path.exists() and not force:
        print_info(f"Config already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=0)

    try:
        saved = save_config(UpdaterConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")


@app.command()
def path() -> None:
    """Print the default config file location."""
    typer.echo(str(get_config_path()))
