"""Utility modules for hostprep.

This module exports commonly used utility functions.
"""

from hostprep.utils.files import append_file, replace_file, set_owner
from hostprep.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from hostprep.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "append_file",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "replace_file",
    "run_command",
    "set_owner",
]
