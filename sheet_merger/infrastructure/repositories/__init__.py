"""Repository implementations for data access.

Mapping configurations, the required-fields list and file completion flags,
all persisted through a document store.
"""

from .configuration_transfer import (
    export_payload,
    parse_import_payload,
    read_import_file,
    write_export_file,
)
from .file_completion_store import DocumentStoreFileCompletion
from .mapping_configuration_repository import (
    MappingConfigLoadError,
    MappingConfigSaveError,
    MappingConfigurationRepository,
    clean_configuration,
    dump_configuration,
    parse_configuration,
)
from .required_fields_provider import (
    DocumentStoreRequiredFieldsProvider,
    StaticRequiredFieldsProvider,
)
from .schema_migration import (
    MigrationError,
    detect_schema_version,
    migrate_configuration_document,
)

__all__ = [
    "DocumentStoreFileCompletion",
    "DocumentStoreRequiredFieldsProvider",
    "MappingConfigLoadError",
    "MappingConfigSaveError",
    "MappingConfigurationRepository",
    "MigrationError",
    "StaticRequiredFieldsProvider",
    "clean_configuration",
    "detect_schema_version",
    "dump_configuration",
    "export_payload",
    "migrate_configuration_document",
    "parse_configuration",
    "parse_import_payload",
    "read_import_file",
    "write_export_file",
]
