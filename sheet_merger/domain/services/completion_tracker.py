from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ...constants import Placeholders
from ..entities.mapping import MappingConfiguration, visible_correspondences


@dataclass(frozen=True, slots=True)
class CompletionStatus:
    file_id: str
    sheet_name: str
    mapped_targets: tuple[str, ...]
    missing_targets: tuple[str, ...]

    @property
    def is_complete(self) -> bool:
        return not self.missing_targets

    @property
    def total(self) -> int:
        return len(self.mapped_targets) + len(self.missing_targets)


def completion_status(
    configuration: MappingConfiguration,
    file_id: str,
    sheet_name: str,
    placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
) -> CompletionStatus:
    mapped: list[str] = []
    missing: list[str] = []
    for correspondence in visible_correspondences(configuration, placeholder_prefixes):
        if correspondence.is_mapped_from(file_id, sheet_name):
            mapped.append(correspondence.target.name)
        else:
            missing.append(correspondence.target.name)
    return CompletionStatus(
        file_id=file_id,
        sheet_name=sheet_name,
        mapped_targets=tuple(mapped),
        missing_targets=tuple(missing),
    )


def is_file_complete(
    configuration: MappingConfiguration,
    file_id: str,
    sheet_name: str,
    placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
) -> bool:
    """True when every target has a source from this file/sheet.

    A configuration without targets is trivially complete.
    """
    return completion_status(
        configuration, file_id, sheet_name, placeholder_prefixes
    ).is_complete


def unmapped_columns(
    configuration: MappingConfiguration,
    file_id: str,
    sheet_name: str,
    columns: Sequence[str],
) -> list[str]:
    claimed = configuration.claimed_columns(file_id, sheet_name)
    return [column for column in columns if column and column not in claimed]
