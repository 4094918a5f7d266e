from pathlib import Path

import click
from rich.console import Console

from ...constants import SourceColumns
from ..helpers import engine_errors, get_state, resolve_configuration
from ..presenters.configuration import ConfigurationPresenter

console = Console()


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--sheet", "sheet_name", default=SourceColumns.DEFAULT_SHEET, show_default=True
)
@click.option("--config", "configuration_id", help="Configuration id")
@click.pass_context
def status_command(
    ctx: click.Context, file: Path, sheet_name: str, configuration_id: str | None
) -> None:
    """Show whether every target has a column from FILE."""
    use_case = get_state(ctx).use_case
    config = resolve_configuration(use_case, configuration_id)
    with engine_errors():
        status = use_case.file_status(config.id, str(file), sheet_name)
    ConfigurationPresenter(console).present_status(status)
