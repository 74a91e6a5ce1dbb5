"""Config command implementation.

Shows the effective configuration and writes a default config file.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer

from hostprep.core.config import ConfigError, ProvisionConfig, load_config, save_config
from hostprep.core.paths import get_default_config_path
from hostprep.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(help="Inspect and create the hostprep configuration file.")


@app.command("show")
def show_config(ctx: typer.Context) -> None:
    """Print the effective configuration as TOML.

    Uses --config from the main command if given, else ./hostprep.toml
    if it exists, else built-in defaults.
    """
    config_path: Path | None = (ctx.obj or {}).get("config_path")
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e

    console.print(tomli_w.dumps(config.to_toml_dict()), markup=False, highlight=False)


@app.command("init")
def init_config(
    path: Annotated[
        Path | None,
        typer.Argument(help="Where to write the config. Defaults to ./hostprep.toml."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing file."),
    ] = False,
) -> None:
    """Write the default configuration to a TOML file.

    Examples:
        hostprep config init
        hostprep config init /root/provision/hostprep.toml --force
    """
    target = path or get_default_config_path()

    if target.exists() and not force:
        print_warning(f"{target} already exists. Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        save_config(ProvisionConfig(), target)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {target}")
