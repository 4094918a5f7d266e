"""Data type inference for source columns and compatibility with targets."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import pandas as pd

from ...constants import Placeholders
from ..entities.mapping import (
    DataType,
    MappingConfiguration,
    SourceFieldRef,
    visible_correspondences,
)
from ..entities.validation import FindingType, ValidationResult

_BOOLEAN_TOKENS = frozenset({"true", "false"})


@dataclass(frozen=True, slots=True)
class TypeCompatibility:
    compatible: bool
    warning: str | None = None

    @property
    def finding_type(self) -> FindingType | None:
        if self.warning is None:
            return None
        if not self.compatible:
            return FindingType.TYPE_MISMATCH
        return FindingType.POTENTIAL_DATA_LOSS


def infer_column_type(values: Iterable[object]) -> DataType | None:
    """Detect the data type of a column from sample values.

    Blank and missing values are ignored. Returns None when nothing is left
    to look at.
    """
    series = pd.Series(list(values), dtype="object")
    series = series[series.notna()]
    series = series[series.astype(str).str.strip() != ""]
    if series.empty:
        return None

    if series.map(_is_boolean_value).all():
        return DataType.BOOLEAN
    if pd.to_numeric(series, errors="coerce").notna().all():
        return DataType.NUMBER
    if pd.to_datetime(series.astype(str), errors="coerce", format="mixed").notna().all():
        return DataType.DATE
    return DataType.TEXT


def _is_boolean_value(value: object) -> bool:
    if isinstance(value, bool):
        return True
    return isinstance(value, str) and value.strip().lower() in _BOOLEAN_TOKENS


def check_type_compatibility(
    source_type: DataType | None, target_type: DataType | None
) -> TypeCompatibility:
    """Whether values of ``source_type`` can feed a ``target_type`` field.

    Text targets accept anything. Text sources feeding typed targets may lose
    values that fail to parse; numbers and dates never convert into each other.
    """
    if source_type is None or target_type is None:
        return TypeCompatibility(True)
    source_type = DataType(source_type)
    target_type = DataType(target_type)
    if source_type == target_type or target_type == DataType.TEXT:
        return TypeCompatibility(True)
    if {source_type, target_type} == {DataType.NUMBER, DataType.DATE}:
        return TypeCompatibility(
            False,
            f"{source_type.value} values cannot be converted to {target_type.value}",
        )
    return TypeCompatibility(
        True,
        f"Converting {source_type.value} to {target_type.value} may lose data",
    )


def validate_source_types(
    configuration: MappingConfiguration,
    column_types: Mapping[SourceFieldRef, DataType | None],
    placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
) -> ValidationResult:
    result = ValidationResult()
    for correspondence in visible_correspondences(configuration, placeholder_prefixes):
        target = correspondence.target
        for ref in correspondence.sources:
            check = check_type_compatibility(column_types.get(ref), target.data_type)
            finding_type = check.finding_type
            if finding_type is None or check.warning is None:
                continue
            result.warning(
                finding_type,
                f"'{ref.field_name}' -> '{target.name}': {check.warning}",
                field=target.name,
                target_id=correspondence.id,
                source_key=ref.key(),
            )
    return result
