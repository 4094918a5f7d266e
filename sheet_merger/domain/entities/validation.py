from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FindingType(str, Enum):
    MISSING_TARGET = "missing_target"
    MISSING_SOURCE = "missing_source"
    DUPLICATE_MAPPING = "duplicate_mapping"
    INVALID_FIELD_NAME = "invalid_field_name"
    TYPE_MISMATCH = "type_mismatch"
    POTENTIAL_DATA_LOSS = "potential_data_loss"
    UNUSED_SOURCE_FIELD = "unused_source_field"
    OTHER = "other"


class FindingSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(slots=True)
class ValidationFinding:
    type: FindingType
    severity: FindingSeverity
    message: str
    field: str | None = None
    target_id: str | None = None
    source_key: str | None = None

    def __str__(self) -> str:
        parts = [f"[{self.type.value}] {self.severity.value}: {self.message}"]
        if self.field:
            parts.append(f"Field: {self.field}")
        return " | ".join(parts)


def _empty_findings() -> list[ValidationFinding]:
    return []


@dataclass(slots=True)
class ValidationResult:
    errors: list[ValidationFinding] = field(default_factory=_empty_findings)
    warnings: list[ValidationFinding] = field(default_factory=_empty_findings)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def error(self, type_: FindingType, message: str, **details: str | None) -> None:
        self.errors.append(
            ValidationFinding(type_, FindingSeverity.ERROR, message, **details)
        )

    def warning(self, type_: FindingType, message: str, **details: str | None) -> None:
        self.warnings.append(
            ValidationFinding(type_, FindingSeverity.WARNING, message, **details)
        )

    def extend(self, other: ValidationResult) -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def types(self) -> set[FindingType]:
        return {f.type for f in (*self.errors, *self.warnings)}
