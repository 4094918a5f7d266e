"""Merged preview of several sheets through a mapping configuration."""

from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from ...constants import Placeholders, SourceColumns
from ..entities.mapping import MappingConfiguration, visible_correspondences


@dataclass(frozen=True, slots=True)
class SheetData:
    file_id: str
    sheet_name: str
    frame: pd.DataFrame


def build_merge_preview(
    configuration: MappingConfiguration,
    sheets: Iterable[SheetData],
    *,
    include_provenance: bool = True,
    placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
) -> pd.DataFrame:
    """Stack every sheet under the configuration's target fields.

    Each target column takes the first of its sources that belongs to the
    sheet and exists in its frame. Targets with no such source come out as
    ``NA`` for that sheet's rows.
    """
    correspondences = visible_correspondences(configuration, placeholder_prefixes)
    target_names = [c.target.name for c in correspondences]
    columns = list(target_names)
    if include_provenance:
        columns += [SourceColumns.FILE, SourceColumns.SHEET]

    parts: list[pd.DataFrame] = []
    for sheet in sheets:
        frame = sheet.frame
        part = pd.DataFrame(index=range(len(frame)))
        for correspondence in correspondences:
            source = next(
                (
                    ref.field_name
                    for ref in correspondence.sources_from(
                        sheet.file_id, sheet.sheet_name
                    )
                    if ref.field_name in frame.columns
                ),
                None,
            )
            if source is None:
                part[correspondence.target.name] = pd.Series(
                    [pd.NA] * len(frame), dtype="object"
                )
            else:
                part[correspondence.target.name] = frame[source].to_numpy(
                    dtype=object
                )
        if include_provenance:
            part[SourceColumns.FILE] = sheet.file_id
            part[SourceColumns.SHEET] = sheet.sheet_name
        parts.append(part)

    if not parts:
        return pd.DataFrame(columns=columns)
    merged = pd.concat(parts, ignore_index=True)
    return merged.reindex(columns=columns)
