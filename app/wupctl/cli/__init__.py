"""CLI package for wupctl.

This package contains the Typer application and all subcommands.
"""

from wupctl.cli.main import app

__all__ = ["app"]
