"""Target commands - add, rename and remove target fields."""

import click
from rich.console import Console

from ...domain.entities.mapping import DataType, TargetFieldDescriptor
from ..helpers import engine_errors, get_state, resolve_configuration, resolve_target

console = Console()

CONFIG_OPTION_HELP = "Configuration id (default: the active configuration)"


@click.group()
def target_group() -> None:
    """Manage target fields of a configuration."""


@target_group.command("add")
@click.argument("name")
@click.option("--config", "configuration_id", help=CONFIG_OPTION_HELP)
@click.option("--description", default="", help="Free-text description")
@click.option(
    "--type",
    "data_type",
    type=click.Choice([t.value for t in DataType]),
    default=DataType.TEXT.value,
    show_default=True,
)
@click.option("--required", is_flag=True, help="Mark the target as required")
@click.pass_context
def add_command(
    ctx: click.Context,
    name: str,
    configuration_id: str | None,
    description: str,
    data_type: str,
    required: bool,
) -> None:
    use_case = get_state(ctx).use_case
    config = resolve_configuration(use_case, configuration_id)
    descriptor = TargetFieldDescriptor(
        name=name,
        description=description,
        data_type=DataType(data_type),
        required=required,
    )
    with engine_errors():
        correspondence = use_case.add_target(config.id, descriptor)
    console.print(correspondence.id)


@target_group.command("rename")
@click.argument("target")
@click.argument("new_name")
@click.option("--config", "configuration_id", help=CONFIG_OPTION_HELP)
@click.pass_context
def rename_command(
    ctx: click.Context, target: str, new_name: str, configuration_id: str | None
) -> None:
    use_case = get_state(ctx).use_case
    config = resolve_configuration(use_case, configuration_id)
    correspondence = resolve_target(config, target)
    with engine_errors():
        use_case.rename_target(config.id, correspondence.id, new_name)
    use_case.logger.success(f"Renamed '{correspondence.target.name}' to '{new_name}'")


@target_group.command("remove")
@click.argument("target")
@click.option("--config", "configuration_id", help=CONFIG_OPTION_HELP)
@click.pass_context
def remove_command(
    ctx: click.Context, target: str, configuration_id: str | None
) -> None:
    use_case = get_state(ctx).use_case
    config = resolve_configuration(use_case, configuration_id)
    correspondence = resolve_target(config, target)
    with engine_errors():
        use_case.remove_target(config.id, correspondence.id)
    use_case.logger.success(f"Removed '{correspondence.target.name}'")
