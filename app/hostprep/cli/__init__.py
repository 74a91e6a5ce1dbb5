"""CLI package for hostprep.

This package contains the Typer application and all subcommands.
"""

from hostprep.cli.main import app

__all__ = ["app"]
