"""Domain entities.

Mapping configurations, their correspondences and validation findings.
"""

from .mapping import (
    DataType,
    FieldCorrespondence,
    MappingConfiguration,
    SourceFieldRef,
    TargetFieldDescriptor,
    is_placeholder_name,
    new_configuration_id,
    new_correspondence_id,
    now_ms,
    visible_correspondences,
)
from .validation import (
    FindingSeverity,
    FindingType,
    ValidationFinding,
    ValidationResult,
)

__all__ = [
    # Mapping entities
    "DataType",
    "FieldCorrespondence",
    "MappingConfiguration",
    "SourceFieldRef",
    "TargetFieldDescriptor",
    "is_placeholder_name",
    "new_configuration_id",
    "new_correspondence_id",
    "now_ms",
    "visible_correspondences",
    # Validation entities
    "FindingSeverity",
    "FindingType",
    "ValidationFinding",
    "ValidationResult",
]
