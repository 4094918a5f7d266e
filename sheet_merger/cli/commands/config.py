"""Config commands - create, inspect and exchange mapping configurations."""

from pathlib import Path

import click
from rich.console import Console

from ...infrastructure.repositories.configuration_transfer import (
    read_import_file,
    write_export_file,
)
from ..helpers import engine_errors, get_state, resolve_configuration
from ..presenters.configuration import ConfigurationPresenter

console = Console()


@click.group()
def config_group() -> None:
    """Manage mapping configurations."""


@config_group.command("create")
@click.argument("name")
@click.option("--description", default="", help="Free-text description")
@click.option(
    "--target",
    "targets",
    multiple=True,
    help="Target field to pre-seed (repeatable)",
)
@click.option(
    "--activate/--no-activate",
    default=True,
    show_default=True,
    help="Make the new configuration the active one",
)
@click.pass_context
def create_command(
    ctx: click.Context,
    name: str,
    description: str,
    targets: tuple[str, ...],
    activate: bool,
) -> None:
    """Create a configuration, optionally seeded with target fields.

    Examples:

    \b
        sheet-merger config create Customers --target "Customer Name" --target Email
    """
    use_case = get_state(ctx).use_case
    with engine_errors():
        config = use_case.create_configuration(name, description, targets)
        if activate:
            use_case.set_active_configuration(config.id)
    console.print(config.id)


@config_group.command("list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    use_case = get_state(ctx).use_case
    with engine_errors():
        configurations = use_case.list_configurations()
        active_id = use_case.get_active_configuration_id()
    ConfigurationPresenter(console).present_list(configurations, active_id)


@config_group.command("show")
@click.argument("configuration_id", required=False)
@click.pass_context
def show_command(ctx: click.Context, configuration_id: str | None) -> None:
    """Show targets and their bound source columns."""
    use_case = get_state(ctx).use_case
    config = resolve_configuration(use_case, configuration_id)
    ConfigurationPresenter(console).present_configuration(config)


@config_group.command("update")
@click.argument("configuration_id")
@click.option("--name", help="New name")
@click.option("--description", help="New description")
@click.pass_context
def update_command(
    ctx: click.Context,
    configuration_id: str,
    name: str | None,
    description: str | None,
) -> None:
    use_case = get_state(ctx).use_case
    with engine_errors():
        config = use_case.update_configuration(
            configuration_id, name=name, description=description
        )
    use_case.logger.success(f"Updated '{config.name}'")


@config_group.command("delete")
@click.argument("configuration_id")
@click.pass_context
def delete_command(ctx: click.Context, configuration_id: str) -> None:
    use_case = get_state(ctx).use_case
    with engine_errors():
        use_case.delete_configuration(configuration_id)


@config_group.command("activate")
@click.argument("configuration_id")
@click.pass_context
def activate_command(ctx: click.Context, configuration_id: str) -> None:
    use_case = get_state(ctx).use_case
    with engine_errors():
        use_case.set_active_configuration(configuration_id)
    use_case.logger.success(f"Active configuration: {configuration_id}")


@config_group.command("export")
@click.argument("configuration_ids", nargs=-1)
@click.option(
    "--output",
    "output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="JSON file to write",
)
@click.option("--all", "export_all", is_flag=True, help="Export every configuration")
@click.pass_context
def export_command(
    ctx: click.Context,
    configuration_ids: tuple[str, ...],
    output: Path,
    export_all: bool,
) -> None:
    """Export configurations as JSON (the active one by default)."""
    use_case = get_state(ctx).use_case
    with engine_errors():
        if export_all:
            configurations = use_case.export_configurations()
        elif configuration_ids:
            configurations = use_case.export_configurations(configuration_ids)
        else:
            configurations = [resolve_configuration(use_case, None)]
        path = write_export_file(configurations, output)
    use_case.logger.success(f"Exported {len(configurations)} configuration(s) to {path}")


@config_group.command("import")
@click.argument(
    "import_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.pass_context
def import_command(ctx: click.Context, import_file: Path) -> None:
    """Import configurations from JSON under fresh ids."""
    state = get_state(ctx)
    use_case = state.use_case
    with engine_errors():
        configurations, errors = read_import_file(
            import_file, state.container.config.placeholder_prefixes
        )
        for message in errors:
            use_case.logger.warning(message)
        summary = use_case.import_configurations(configurations)
    for config in summary.imported:
        console.print(f"{config.id}  {config.name}")
    if not summary.imported:
        raise click.ClickException("No configurations were imported")
