"""CLI commands for wupctl.

This package contains all subcommand implementations.
"""

from wupctl.cli.commands import check, config, history, undo, update

__all__ = ["check", "config", "history", "undo", "update"]
