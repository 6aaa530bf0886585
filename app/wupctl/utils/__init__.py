"""Utility modules for wupctl.

This module exports commonly used utility functions.
"""

from wupctl.utils.formatting import (
    console,
    create_records_table,
    err_console,
    format_record_row,
    format_status,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from wupctl.utils.shell import CommandResult, command_exists, run_command, run_powershell

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_records_table",
    "err_console",
    "format_record_row",
    "format_status",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_powershell",
]
