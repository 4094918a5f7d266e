"""Domain services.

Business logic that operates on mapping configurations.
"""

from .completion_tracker import (
    CompletionStatus,
    completion_status,
    is_file_complete,
    unmapped_columns,
)
from .correspondence_editor import CorrespondenceEditor
from .matching.history_advisor import HistoryAdvisor
from .matching.normalizer import normalize_field_name
from .matching.resolver import (
    AutoMapResult,
    AutoMapStage,
    Binding,
    CorrespondenceResolver,
)
from .matching.similarity import similarity
from .merge_service import SheetData, build_merge_preview
from .type_compatibility import (
    TypeCompatibility,
    check_type_compatibility,
    infer_column_type,
    validate_source_types,
)
from .validation_service import MappingValidator

__all__ = [
    # Completion tracking
    "CompletionStatus",
    "completion_status",
    "is_file_complete",
    "unmapped_columns",
    # Editing
    "CorrespondenceEditor",
    # Matching
    "AutoMapResult",
    "AutoMapStage",
    "Binding",
    "CorrespondenceResolver",
    "HistoryAdvisor",
    "normalize_field_name",
    "similarity",
    # Merge preview
    "SheetData",
    "build_merge_preview",
    # Types
    "TypeCompatibility",
    "check_type_compatibility",
    "infer_column_type",
    "validate_source_types",
    # Validation
    "MappingValidator",
]
