from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.entities.mapping import MappingConfiguration
    from ..domain.services.completion_tracker import CompletionStatus
    from ..domain.services.matching.resolver import Binding


def _empty_bindings() -> list[Binding]:
    return []


def _empty_str_list() -> list[str]:
    return []


@dataclass(frozen=True, slots=True)
class ConfigurationChanged:
    """Emitted after every successful mutation of a configuration."""

    configuration_id: str
    operation: str
    updated_at: int | None
    affected_sheets: tuple[tuple[str, str], ...] = ()


@dataclass(slots=True)
class AutoMapResponse:
    configuration: MappingConfiguration
    file_id: str
    sheet_name: str
    bindings: list[Binding] = field(default_factory=_empty_bindings)
    is_complete: bool = False

    @property
    def new_bindings(self) -> int:
        return len(self.bindings)


@dataclass(slots=True)
class FileStatus:
    completion: CompletionStatus
    unmapped_columns: list[str] = field(default_factory=_empty_str_list)


@dataclass(slots=True)
class ImportSummary:
    imported: list[MappingConfiguration]
    skipped: int = 0
    errors: list[str] = field(default_factory=_empty_str_list)

