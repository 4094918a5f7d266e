import click
from rich.console import Console

from ..helpers import engine_errors, get_state

console = Console()


@click.group()
def required_group() -> None:
    """Manage the list of required target fields."""


@required_group.command("list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    use_case = get_state(ctx).use_case
    names = use_case.required_target_names()
    if not names:
        console.print("[dim]No required fields[/dim]")
    for name in names:
        console.print(name)


@required_group.command("add")
@click.argument("name")
@click.pass_context
def add_command(ctx: click.Context, name: str) -> None:
    use_case = get_state(ctx).use_case
    with engine_errors():
        use_case.add_required_field(name)


@required_group.command("remove")
@click.argument("name")
@click.pass_context
def remove_command(ctx: click.Context, name: str) -> None:
    use_case = get_state(ctx).use_case
    with engine_errors():
        use_case.remove_required_field(name)
