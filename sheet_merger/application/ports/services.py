from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import pandas as pd

    from ...domain.services.matching.resolver import AutoMapResult, Binding


@runtime_checkable
class LoggerPort(Protocol):
    pass

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def log_auto_map_stage(self, stage: str, bindings: list[Binding]) -> None: ...

    def log_auto_map_complete(
        self, file_id: str, sheet_name: str, result: AutoMapResult
    ) -> None: ...

    def log_binding(
        self, operation: str, target_name: str, field_name: str
    ) -> None: ...


@runtime_checkable
class SpreadsheetReaderPort(Protocol):
    pass

    def read_columns(self, file_id: str, sheet_name: str) -> list[str]: ...

    def read_rows(self, file_id: str, sheet_name: str) -> pd.DataFrame: ...

    def list_sheets(self, file_id: str) -> list[str]: ...
