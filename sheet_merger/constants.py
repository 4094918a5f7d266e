from typing import ClassVar


class Defaults:
    SIMILARITY_THRESHOLD = 0.6
    ASSIGNMENT_THRESHOLD = 0.7
    STORAGE_DIR = ".sheet_merger"
    CONFIG_FILE = "sheet_merger.toml"
    HISTORY_ENABLED = True
    TYPE_SAMPLE_ROWS = 200


class ScoreWeights:
    EDIT_DISTANCE = 0.6
    BIGRAM = 0.4


class Placeholders:
    PREFIXES: ClassVar[tuple[str, ...]] = ("field_", "fieldmap_")
    CONFIGURATION_ID_PREFIX = "mapping_"
    CORRESPONDENCE_ID_PREFIX = "fieldmap_"


class StorageKeys:
    CONFIGURATIONS = "mapping_configs"
    ACTIVE_CONFIGURATION = "active_mapping_config"
    REQUIRED_FIELDS = "required_fields"
    FILE_COMPLETION = "file_completion"


class SchemaVersions:
    CURRENT = 2
    LEGACY_FIELD_MAPS = 1
    LEGACY_FIELDS = 0


class LogLevels:
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


class SourceColumns:
    FILE = "_source_file"
    SHEET = "_source_sheet"
    DEFAULT_SHEET = "Sheet1"
