from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, override

from rich.console import Console
from rich.markup import escape

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from ...domain.services.matching.resolver import AutoMapResult, Binding


class LogLevel(IntEnum):
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass(slots=True)
class LogContext:
    configuration_id: str = ""
    file_id: str = ""
    sheet_name: str = ""
    operation: str = ""
    start_time: datetime = field(default_factory=datetime.now)

    def elapsed_ms(self) -> float:
        return (datetime.now() - self.start_time).total_seconds() * 1000


def _empty_stats() -> dict[str, int]:
    return {"bindings": 0, "auto_map_runs": 0, "warnings": 0, "errors": 0}


class ConsoleLogger(LoggerPort):
    pass

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        super().__init__()
        self.console = console or Console()
        self.verbosity = verbosity
        self._context: LogContext | None = None
        self._stats: dict[str, int] = _empty_stats()

    def set_context(self, **kwargs: str) -> None:
        if self._context is None:
            self._context = LogContext()
        for key, value in kwargs.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

    def clear_context(self) -> None:
        self._context = None

    @override
    def info(self, message: str, *, level: int = LogLevel.NORMAL) -> None:
        if self.verbosity >= level:
            prefix = self._get_prefix()
            self.console.print(f"{prefix}{message}")

    @override
    def verbose(self, message: str) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            prefix = self._get_prefix()
            self.console.print(f"[dim]{prefix}{message}[/dim]")

    @override
    def debug(self, message: str) -> None:
        if self.verbosity >= LogLevel.DEBUG:
            prefix = self._get_prefix()
            self.console.print(f"[dim cyan]{prefix}{message}[/dim cyan]")

    @override
    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    @override
    def warning(self, message: str) -> None:
        self._stats["warnings"] += 1
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    @override
    def error(self, message: str) -> None:
        self._stats["errors"] += 1
        self.console.print(f"[red]✗[/red] {message}")

    @override
    def log_auto_map_stage(self, stage: str, bindings: list[Binding]) -> None:
        if not bindings:
            self.debug(f"  Stage {stage}: no new bindings")
            return
        self.verbose(f"  Stage {stage}: {len(bindings)} binding(s)")
        for binding in bindings:
            self.debug(
                f"    {binding.field_name} → {binding.target_name} ({binding.score:.2f})"
            )

    @override
    def log_auto_map_complete(
        self, file_id: str, sheet_name: str, result: AutoMapResult
    ) -> None:
        self._stats["auto_map_runs"] += 1
        self._stats["bindings"] += result.new_bindings
        if result.new_bindings:
            self.success(
                f"Auto-mapped {result.new_bindings} column(s) from {file_id}/{sheet_name}"
            )
        else:
            self.info(f"No new bindings for {file_id}/{sheet_name}")

    @override
    def log_binding(self, operation: str, target_name: str, field_name: str) -> None:
        if operation == "bind":
            self._stats["bindings"] += 1
            self.verbose(f"Bound {field_name} → {target_name}")
        else:
            self.verbose(f"Unbound {field_name} from {target_name}")

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()

    def reset_stats(self) -> None:
        self._stats = _empty_stats()

    def _get_prefix(self) -> str:
        if self._context is None or self.verbosity < LogLevel.DEBUG:
            return ""
        parts = [
            part
            for part in (
                self._context.configuration_id,
                self._context.file_id,
                self._context.sheet_name,
                self._context.operation,
            )
            if part
        ]
        return escape(f"[{':'.join(parts)}] ") if parts else ""
