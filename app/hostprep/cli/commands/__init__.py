"""CLI commands for hostprep.

This package contains all subcommand implementations.
"""

from hostprep.cli.commands import config

__all__ = ["config"]
