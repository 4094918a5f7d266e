"""JSON import and export of mapping configurations.

An export file holds either one configuration object or a list of them.
Imported entries go through the same migration and cleanup as stored ones;
unreadable entries are skipped and reported.
"""

from __future__ import annotations

from collections.abc import Iterable
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ...constants import Placeholders
from ..io.exceptions import DataSourceNotFoundError
from .mapping_configuration_repository import (
    MappingConfigLoadError,
    MappingConfigSaveError,
    dump_configuration,
    parse_configuration,
)

if TYPE_CHECKING:
    from ...domain.entities.mapping import MappingConfiguration


def export_payload(
    configurations: Iterable[MappingConfiguration],
) -> dict[str, Any] | list[dict[str, Any]]:
    documents = [dump_configuration(c) for c in configurations]
    if len(documents) == 1:
        return documents[0]
    return documents


def write_export_file(
    configurations: Iterable[MappingConfiguration], path: str | Path
) -> Path:
    file_path = Path(path)
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("w", encoding="utf-8") as handle:
            json.dump(export_payload(configurations), handle, indent=2, ensure_ascii=False)
    except Exception as exc:
        raise MappingConfigSaveError(f"Failed to export configurations: {exc}") from exc
    return file_path


def parse_import_payload(
    payload: object,
    placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
) -> tuple[list[MappingConfiguration], list[str]]:
    """Parse one document or a list of documents.

    Returns the readable configurations and one message per skipped entry.
    """
    documents: list[object] = list(payload) if isinstance(payload, list) else [payload]
    configurations: list[MappingConfiguration] = []
    errors: list[str] = []
    for index, document in enumerate(documents):
        try:
            configurations.append(
                parse_configuration(
                    document, placeholder_prefixes, on_repair=errors.append
                )
            )
        except MappingConfigLoadError as exc:
            errors.append(f"Entry #{index}: {exc}")
    return configurations, errors


def read_import_file(
    path: str | Path,
    placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
) -> tuple[list[MappingConfiguration], list[str]]:
    file_path = Path(path)
    if not file_path.exists():
        raise DataSourceNotFoundError(f"Import file not found: {file_path}")
    try:
        with file_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise MappingConfigLoadError(f"Invalid JSON in {file_path}: {exc}") from exc
    return parse_import_payload(payload, placeholder_prefixes)
