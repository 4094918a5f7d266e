from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.console import Console

    from ...application.models import AutoMapResponse, FileStatus
    from ...domain.entities.mapping import MappingConfiguration


def _format_timestamp(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M")


class ConfigurationPresenter:
    pass

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present_list(
        self, configurations: Sequence[MappingConfiguration], active_id: str | None
    ) -> None:
        if not configurations:
            self.console.print("[dim]No mapping configurations yet[/dim]")
            return
        table = Table(title="Mapping Configurations")
        table.add_column("", width=1)
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Targets", justify="right")
        table.add_column("Updated")
        for config in configurations:
            table.add_row(
                "*" if config.id == active_id else "",
                config.id,
                config.name,
                str(len(config.correspondences)),
                _format_timestamp(config.updated_at),
            )
        self.console.print(table)

    def present_configuration(self, config: MappingConfiguration) -> None:
        self.console.print(f"[bold]{config.name}[/bold] [dim]({config.id})[/dim]")
        if config.description:
            self.console.print(config.description)
        table = Table()
        table.add_column("Target", style="cyan")
        table.add_column("Type")
        table.add_column("Required", justify="center")
        table.add_column("Sources")
        for correspondence in config.correspondences:
            target = correspondence.target
            sources = "\n".join(
                f"{ref.file_id} / {ref.sheet_name} / {ref.field_name}"
                for ref in correspondence.sources
            )
            table.add_row(
                target.name,
                target.data_type.value,
                "✓" if target.required else "",
                sources or "[dim]-[/dim]",
            )
        self.console.print(table)

    def present_auto_map(self, response: AutoMapResponse) -> None:
        if not response.bindings:
            self.console.print(
                f"No new bindings for {response.file_id} / {response.sheet_name}"
            )
        else:
            table = Table(title=f"Auto-map: {response.file_id} / {response.sheet_name}")
            table.add_column("Column")
            table.add_column("Target", style="cyan")
            table.add_column("Stage")
            table.add_column("Score", justify="right")
            for binding in response.bindings:
                table.add_row(
                    binding.field_name,
                    binding.target_name,
                    binding.stage.value,
                    f"{binding.score:.2f}",
                )
            self.console.print(table)
        self._print_completion(response.is_complete)

    def present_status(self, status: FileStatus) -> None:
        completion = status.completion
        self.console.print(
            f"{completion.file_id} / {completion.sheet_name}: "
            f"{len(completion.mapped_targets)}/{completion.total} targets mapped"
        )
        self._print_completion(completion.is_complete)
        if completion.missing_targets:
            self.console.print(
                "Unmapped targets: " + ", ".join(completion.missing_targets)
            )
        if status.unmapped_columns:
            self.console.print(
                "Unused columns: " + ", ".join(status.unmapped_columns)
            )

    def _print_completion(self, complete: bool) -> None:
        if complete:
            self.console.print("[green]✓[/green] File is complete")
        else:
            self.console.print("[yellow]⚠[/yellow] File is incomplete")
