"""Application layer for Sheet Merger.

This layer contains use cases and application-level orchestration logic.
It defines ports (interfaces) for external dependencies.
"""

from .models import (
    AutoMapResponse,
    ConfigurationChanged,
    FileStatus,
    ImportSummary,
)

# Import the use case directly when needed:
#   from sheet_merger.application.mapping_configuration_use_case import MappingConfigurationUseCase

__all__ = [
    "AutoMapResponse",
    "ConfigurationChanged",
    "FileStatus",
    "ImportSummary",
]
