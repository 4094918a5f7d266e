"""Sheet Merger package.

Reconciles the column headers of many spreadsheets into one set of target
fields so their rows can be merged into a single table.

Features:
- Mapping configurations of target fields and their bound source columns
- Multi-stage auto-mapping (reuse, history, exact, similarity, assignment)
- Validation, type compatibility checks and per-file completion tracking
- JSON import/export with migration of older document layouts
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover
    __version__ = version("sheet-merger")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

from sheet_merger.domain.entities.mapping import (
    DataType,
    FieldCorrespondence,
    MappingConfiguration,
    SourceFieldRef,
    TargetFieldDescriptor,
)
from sheet_merger.domain.services.matching.resolver import CorrespondenceResolver
from sheet_merger.infrastructure.container import create_default_container

__all__ = [
    "__version__",
    # Entities
    "DataType",
    "FieldCorrespondence",
    "MappingConfiguration",
    "SourceFieldRef",
    "TargetFieldDescriptor",
    # Services
    "CorrespondenceResolver",
    "create_default_container",
]
