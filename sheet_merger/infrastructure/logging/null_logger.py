from __future__ import annotations

from typing import TYPE_CHECKING, override

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from ...domain.services.matching.resolver import AutoMapResult, Binding


class NullLogger(LoggerPort):
    pass

    @override
    def info(self, message: str) -> None:
        return

    @override
    def success(self, message: str) -> None:
        return

    @override
    def warning(self, message: str) -> None:
        return

    @override
    def error(self, message: str) -> None:
        return

    @override
    def debug(self, message: str) -> None:
        return

    @override
    def verbose(self, message: str) -> None:
        return

    @override
    def log_auto_map_stage(self, stage: str, bindings: list[Binding]) -> None:
        return None

    @override
    def log_auto_map_complete(
        self, file_id: str, sheet_name: str, result: AutoMapResult
    ) -> None:
        return None

    @override
    def log_binding(self, operation: str, target_name: str, field_name: str) -> None:
        return None
