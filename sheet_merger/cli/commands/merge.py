"""Merge command - stack several sheets under the target fields."""

from pathlib import Path

import click
from rich.console import Console

from ...constants import SourceColumns
from ..helpers import engine_errors, get_state, resolve_configuration

console = Console()


@click.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--sheet", "sheet_name", default=SourceColumns.DEFAULT_SHEET, show_default=True
)
@click.option("--config", "configuration_id", help="Configuration id")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="CSV file to write",
)
@click.option(
    "--provenance/--no-provenance",
    default=True,
    show_default=True,
    help="Add _source_file and _source_sheet columns",
)
@click.pass_context
def merge_command(
    ctx: click.Context,
    files: tuple[Path, ...],
    sheet_name: str,
    configuration_id: str | None,
    output: Path,
    provenance: bool,
) -> None:
    use_case = get_state(ctx).use_case
    config = resolve_configuration(use_case, configuration_id)
    with engine_errors():
        merged = use_case.merge_preview(
            config.id,
            [(str(f), sheet_name) for f in files],
            include_provenance=provenance,
        )
    output.parent.mkdir(parents=True, exist_ok=True)
    merged.to_csv(output, index=False)
    use_case.logger.success(f"Wrote {len(merged):,} rows to {output}")
