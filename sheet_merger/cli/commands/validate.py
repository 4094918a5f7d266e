"""Validate command - check a configuration for errors and warnings."""

from pathlib import Path

import click
from rich.console import Console

from ...constants import SourceColumns
from ..helpers import engine_errors, get_state, resolve_configuration
from ..presenters.validation import ValidationPresenter

console = Console()


@click.command()
@click.option("--config", "configuration_id", help="Configuration id")
@click.option(
    "--file",
    "files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Also report unused columns and type problems for this file (repeatable)",
)
@click.option(
    "--sheet",
    "sheet_name",
    default=SourceColumns.DEFAULT_SHEET,
    show_default=True,
    help="Sheet used for --file",
)
@click.pass_context
def validate_command(
    ctx: click.Context,
    configuration_id: str | None,
    files: tuple[Path, ...],
    sheet_name: str,
) -> None:
    """Validate a configuration. Exits with status 1 when it has errors."""
    use_case = get_state(ctx).use_case
    config = resolve_configuration(use_case, configuration_id)
    with engine_errors():
        result = use_case.validate(
            config.id, sheets=[(str(f), sheet_name) for f in files]
        )
    ValidationPresenter(console).present(result, title=f"Validation: {config.name}")
    if not result.is_valid:
        ctx.exit(1)
