"""Main CLI application entry point.

Defines the Typer application and global options. Invoked without a
subcommand, hostprep runs the full provisioning sequence.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from hostprep import __version__
from hostprep.cli.commands import config
from hostprep.cli.display import print_run_summary
from hostprep.core.config import ConfigError, build_context, load_config
from hostprep.core.runner import Runner
from hostprep.core.session_log import SessionLog
from hostprep.utils.formatting import err_console, print_error

app = typer.Typer(
    name="hostprep",
    help="One-time post-installation provisioning for Debian/Ubuntu hosts.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"hostprep version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route hostprep diagnostics to stderr through Rich.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    root = logging.getLogger("hostprep")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=err_console, show_path=False, markup=False))


def provision(config_path: Path | None) -> int:
    """Run provisioning and return the process exit code.

    Args:
        config_path: Explicit config file, or None for the default lookup.

    Returns:
        0 once the privilege check passed, 1 if it failed, 2 on a bad config.
    """
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        return 2

    context = build_context(cfg)
    with SessionLog(context.log_path) as session:
        report = Runner(context, session).run()

    if report.aborted:
        return report.exit_code

    print_run_summary(report)
    return report.exit_code


@app.callback(invoke_without_command=True)
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
            help="Enable debug diagnostics on stderr.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file (TOML). Defaults to ./hostprep.toml when present.",
        ),
    ] = None,
) -> None:
    """hostprep - provision a freshly installed host.

    Updates the system, installs packages from lists/packages.txt,
    applies MOTD and rc fragments from config/, optionally adds an SSH
    public key and restricts sshd to key authentication.

    Must be run as root.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path

    if ctx.invoked_subcommand is not None:
        return

    code = provision(config_path)
    if code != 0:
        raise typer.Exit(code=code)


app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
