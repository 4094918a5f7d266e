"""Automap command - map a spreadsheet's columns onto the target fields."""

from pathlib import Path

import click
from rich.console import Console

from ..helpers import engine_errors, get_state, resolve_configuration
from ..presenters.configuration import ConfigurationPresenter

console = Console()


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--sheet", "sheet_name", help="Sheet to map (default: every sheet)")
@click.option("--config", "configuration_id", help="Configuration id")
@click.pass_context
def automap_command(
    ctx: click.Context,
    file: Path,
    sheet_name: str | None,
    configuration_id: str | None,
) -> None:
    """Auto-map FILE onto the configuration.

    Stages run in order: names already used for another file, names learned
    from other saved configurations, exact and normalized names, similarity,
    then one-to-one assignment of the remainder.

    Examples:

    \b
        sheet-merger automap january.xlsx --sheet Orders
    """
    state = get_state(ctx)
    use_case = state.use_case
    config = resolve_configuration(use_case, configuration_id)
    reader = state.container.create_spreadsheet_reader()
    file_id = str(file)
    presenter = ConfigurationPresenter(console)
    with engine_errors():
        sheets = [sheet_name] if sheet_name else reader.list_sheets(file_id)
        for sheet in sheets:
            response = use_case.auto_map(config.id, file_id, sheet)
            presenter.present_auto_map(response)
