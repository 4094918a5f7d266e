"""Bind and unbind commands - attach source columns to target fields by hand."""

import click

from ...constants import SourceColumns
from ...domain.entities.mapping import SourceFieldRef
from ..helpers import engine_errors, get_state, resolve_configuration, resolve_target


@click.command()
@click.argument("target")
@click.option("--config", "configuration_id", help="Configuration id")
@click.option("--file", "file_id", required=True, help="Source file id")
@click.option(
    "--sheet", "sheet_name", default=SourceColumns.DEFAULT_SHEET, show_default=True
)
@click.option("--column", "field_name", required=True, help="Source column")
@click.pass_context
def bind_command(
    ctx: click.Context,
    target: str,
    configuration_id: str | None,
    file_id: str,
    sheet_name: str,
    field_name: str,
) -> None:
    """Bind a source column to TARGET, moving it away from any other target."""
    use_case = get_state(ctx).use_case
    config = resolve_configuration(use_case, configuration_id)
    correspondence = resolve_target(config, target)
    ref = SourceFieldRef(file_id=file_id, sheet_name=sheet_name, field_name=field_name)
    with engine_errors():
        use_case.bind(config.id, correspondence.id, ref)


@click.command()
@click.argument("target")
@click.option("--config", "configuration_id", help="Configuration id")
@click.option("--file", "file_id", required=True, help="Source file id")
@click.option(
    "--sheet", "sheet_name", default=SourceColumns.DEFAULT_SHEET, show_default=True
)
@click.option("--column", "field_name", required=True, help="Source column")
@click.pass_context
def unbind_command(
    ctx: click.Context,
    target: str,
    configuration_id: str | None,
    file_id: str,
    sheet_name: str,
    field_name: str,
) -> None:
    """Remove a source column from TARGET. Unknown bindings are ignored."""
    use_case = get_state(ctx).use_case
    config = resolve_configuration(use_case, configuration_id)
    correspondence = resolve_target(config, target)
    ref = SourceFieldRef(file_id=file_id, sheet_name=sheet_name, field_name=field_name)
    with engine_errors():
        use_case.unbind(config.id, correspondence.id, ref)
