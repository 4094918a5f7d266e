from collections.abc import Iterable
from enum import Enum
import time
import uuid

from pydantic import BaseModel, ConfigDict, Field

from ...constants import Placeholders, SchemaVersions


def now_ms() -> int:
    return time.time_ns() // 1_000_000


class DataType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"


class TargetFieldDescriptor(BaseModel):
    name: str
    description: str = ""
    data_type: DataType = DataType.TEXT
    required: bool = False


class SourceFieldRef(BaseModel):
    """One column of one sheet of one uploaded file.

    Frozen so it compares and hashes structurally.
    """

    model_config = ConfigDict(frozen=True)

    file_id: str
    sheet_name: str
    field_name: str

    def belongs_to(self, file_id: str, sheet_name: str) -> bool:
        return self.file_id == file_id and self.sheet_name == sheet_name

    @property
    def is_complete(self) -> bool:
        return bool(self.file_id and self.sheet_name and self.field_name)

    def key(self) -> str:
        return f"{self.file_id}:{self.sheet_name}:{self.field_name}"


class FieldCorrespondence(BaseModel):
    id: str
    target: TargetFieldDescriptor
    sources: list[SourceFieldRef] = Field(default_factory=list)

    def contains(self, ref: SourceFieldRef) -> bool:
        return ref in self.sources

    def sources_from(self, file_id: str, sheet_name: str) -> list[SourceFieldRef]:
        return [ref for ref in self.sources if ref.belongs_to(file_id, sheet_name)]

    def is_mapped_from(self, file_id: str, sheet_name: str) -> bool:
        return any(ref.belongs_to(file_id, sheet_name) for ref in self.sources)


class MappingConfiguration(BaseModel):
    schema_version: int = SchemaVersions.CURRENT
    id: str
    name: str
    description: str = ""
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)
    correspondences: list[FieldCorrespondence] = Field(default_factory=list)

    def touch(self) -> None:
        # Strictly increasing even when two mutations land in the same millisecond.
        self.updated_at = max(now_ms(), self.updated_at + 1)

    def get_correspondence(self, correspondence_id: str) -> FieldCorrespondence | None:
        for correspondence in self.correspondences:
            if correspondence.id == correspondence_id:
                return correspondence
        return None

    def owner_of(self, ref: SourceFieldRef) -> FieldCorrespondence | None:
        for correspondence in self.correspondences:
            if correspondence.contains(ref):
                return correspondence
        return None

    def claimed_columns(self, file_id: str, sheet_name: str) -> set[str]:
        return {
            ref.field_name
            for correspondence in self.correspondences
            for ref in correspondence.sources_from(file_id, sheet_name)
        }

    @property
    def target_names(self) -> list[str]:
        return [c.target.name for c in self.correspondences]


def new_configuration_id() -> str:
    return f"{Placeholders.CONFIGURATION_ID_PREFIX}{uuid.uuid4().hex}"


def new_correspondence_id() -> str:
    return f"{Placeholders.CORRESPONDENCE_ID_PREFIX}{uuid.uuid4().hex}"


def is_placeholder_name(
    name: str | None, prefixes: Iterable[str] = Placeholders.PREFIXES
) -> bool:
    if not name or not name.strip():
        return True
    return any(name.startswith(prefix) for prefix in prefixes)


def visible_correspondences(
    configuration: MappingConfiguration,
    prefixes: Iterable[str] = Placeholders.PREFIXES,
) -> list[FieldCorrespondence]:
    """Correspondences whose target carries a real display name."""
    prefixes = tuple(prefixes)
    return [
        c
        for c in configuration.correspondences
        if not is_placeholder_name(c.target.name, prefixes)
    ]
