from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

from ...domain.entities.validation import FindingSeverity

if TYPE_CHECKING:
    from rich.console import Console

    from ...domain.entities.validation import ValidationResult


class ValidationPresenter:
    pass

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present(self, result: ValidationResult, *, title: str = "Validation") -> None:
        findings = [*result.errors, *result.warnings]
        if findings:
            table = Table(title=title)
            table.add_column("Severity")
            table.add_column("Type")
            table.add_column("Field", style="cyan")
            table.add_column("Message")
            for finding in findings:
                severity = (
                    "[red]error[/red]"
                    if finding.severity == FindingSeverity.ERROR
                    else "[yellow]warning[/yellow]"
                )
                table.add_row(
                    severity, finding.type.value, finding.field or "", finding.message
                )
            self.console.print(table)
        summary = f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
        if result.is_valid:
            self.console.print(f"[green]✓[/green] Configuration is valid ({summary})")
        else:
            self.console.print(f"[red]✗[/red] Configuration is invalid ({summary})")
