from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console

from ..config import ConfigLoader
from ..infrastructure.container import DependencyContainer
from .commands.automap import automap_command
from .commands.bindings import bind_command, unbind_command
from .commands.config import config_group
from .commands.merge import merge_command
from .commands.required import required_group
from .commands.status import status_command
from .commands.target import target_group
from .commands.validate import validate_command
from .helpers import CliState

console = Console()


@click.group()
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a sheet_merger.toml config file (default: ./sheet_merger.toml)",
)
@click.option(
    "--storage-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding saved configurations (default: ./.sheet_merger)",
)
@click.option(
    "-v", "--verbose", count=True, help="Increase verbosity level (e.g., -v, -vv)"
)
@click.pass_context
def app(
    ctx: click.Context,
    config_file: Path | None,
    storage_dir: Path | None,
    verbose: int,
) -> None:
    """Reconcile spreadsheet columns into one set of target fields."""
    config = ConfigLoader.load(config_file=config_file)
    if storage_dir is not None:
        config = replace(config, storage_dir=storage_dir)
    container = DependencyContainer(config=config, verbose=verbose, console=console)
    ctx.obj = CliState(container=container)


app.add_command(config_group, name="config")
app.add_command(target_group, name="target")
app.add_command(bind_command, name="bind")
app.add_command(unbind_command, name="unbind")
app.add_command(automap_command, name="automap")
app.add_command(validate_command, name="validate")
app.add_command(status_command, name="status")
app.add_command(merge_command, name="merge")
app.add_command(required_group, name="required")
__all__ = ["app"]
