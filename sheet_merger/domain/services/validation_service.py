"""Checks a mapping configuration against its invariants and a required list.

Findings are returned, never raised. Errors make a configuration invalid;
warnings are informational.
"""

from collections.abc import Iterable, Mapping, Sequence

from pydantic import ValidationError

from ...constants import Placeholders
from ..entities.mapping import (
    FieldCorrespondence,
    MappingConfiguration,
    is_placeholder_name,
)
from ..entities.validation import FindingType, ValidationResult
from .matching.normalizer import normalize_field_name

ColumnsBySheet = Mapping[tuple[str, str], Sequence[str]]


class MappingValidator:
    """Validates whole configurations or single correspondences.

    Required target names are compared on their normalized form, so
    ``"Customer Name"`` satisfies a requirement for ``"customer_name"``.
    """

    def __init__(self, placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES):
        self._placeholder_prefixes = tuple(placeholder_prefixes)

    def validate(
        self,
        configuration: MappingConfiguration | None,
        required_target_names: Iterable[str] = (),
        *,
        columns: ColumnsBySheet | None = None,
    ) -> ValidationResult:
        result = ValidationResult()
        if configuration is None:
            result.error(FindingType.OTHER, "No mapping configuration given")
            return result

        if not configuration.name or not configuration.name.strip():
            result.warning(FindingType.OTHER, "Mapping configuration has no name")

        required = _normalized_names(required_target_names)
        seen: dict[str, str] = {}
        for correspondence in configuration.correspondences:
            name = correspondence.target.name
            if is_placeholder_name(name, self._placeholder_prefixes):
                continue
            key = normalize_field_name(name)
            if key in seen:
                result.error(
                    FindingType.DUPLICATE_MAPPING,
                    f"Duplicate target field: {name}",
                    field=name,
                    target_id=correspondence.id,
                )
            else:
                seen[key] = correspondence.id
            self._check_entry(
                correspondence,
                is_required=normalize_field_name(name) in required,
                result=result,
            )

        for name in _unique(required_target_names):
            if normalize_field_name(name) not in seen:
                result.error(
                    FindingType.MISSING_TARGET,
                    f"Required target field '{name}' is not in the configuration",
                    field=name,
                )

        if columns:
            result.extend(self.unused_columns(configuration, columns))
        return result

    def validate_document(
        self, document: object, required_target_names: Iterable[str] = ()
    ) -> ValidationResult:
        """Validate a raw stored record that may not parse as a configuration."""
        result = ValidationResult()
        if not isinstance(document, Mapping):
            result.error(FindingType.OTHER, "No mapping configuration given")
            return result
        if not isinstance(document.get("correspondences"), list):
            result.error(FindingType.OTHER, "Configuration has no valid correspondence list")
            return result
        try:
            configuration = MappingConfiguration.model_validate(document)
        except ValidationError as e:
            result.error(
                FindingType.OTHER,
                f"Configuration is malformed: {e.error_count()} invalid value(s)",
            )
            return result
        return self.validate(configuration, required_target_names)

    def validate_correspondence(
        self, correspondence: FieldCorrespondence | None, is_required: bool = False
    ) -> ValidationResult:
        result = ValidationResult()
        if correspondence is None:
            result.error(FindingType.OTHER, "No correspondence given")
            return result
        self._check_entry(correspondence, is_required=is_required, result=result)
        return result

    def unused_columns(
        self, configuration: MappingConfiguration, columns: ColumnsBySheet
    ) -> ValidationResult:
        result = ValidationResult()
        for (file_id, sheet_name), names in columns.items():
            claimed = configuration.claimed_columns(file_id, sheet_name)
            for column in names:
                if column and column not in claimed:
                    result.warning(
                        FindingType.UNUSED_SOURCE_FIELD,
                        f"Column '{column}' of {file_id}/{sheet_name} is not mapped",
                        field=column,
                        source_key=f"{file_id}:{sheet_name}:{column}",
                    )
        return result

    def _check_entry(
        self,
        correspondence: FieldCorrespondence,
        *,
        is_required: bool,
        result: ValidationResult,
    ) -> None:
        name = correspondence.target.name
        if not name or not name.strip():
            result.error(
                FindingType.MISSING_TARGET,
                "Target field has no name",
                target_id=correspondence.id,
            )
            return

        if not correspondence.sources:
            message = f"Target field '{name}' has no mapped source fields"
            if is_required:
                result.error(
                    FindingType.MISSING_SOURCE,
                    message,
                    field=name,
                    target_id=correspondence.id,
                )
            else:
                result.warning(
                    FindingType.OTHER, message, field=name, target_id=correspondence.id
                )
            return

        seen: set[str] = set()
        for ref in correspondence.sources:
            if not ref.is_complete:
                result.error(
                    FindingType.INVALID_FIELD_NAME,
                    f"Source field linked to '{name}' is incomplete",
                    field=name,
                    target_id=correspondence.id,
                    source_key=ref.key(),
                )
                continue
            key = ref.key()
            if key in seen:
                result.warning(
                    FindingType.DUPLICATE_MAPPING,
                    f"Target field '{name}' lists source '{ref.field_name}' twice",
                    field=ref.field_name,
                    target_id=correspondence.id,
                    source_key=key,
                )
            else:
                seen.add(key)


def _normalized_names(names: Iterable[str]) -> set[str]:
    return {key for key in (normalize_field_name(n) for n in names) if key}


def _unique(names: Iterable[str]) -> list[str]:
    out: list[str] = []
    keys: set[str] = set()
    for name in names:
        key = normalize_field_name(name)
        if key and key not in keys:
            keys.add(key)
            out.append(name)
    return out
