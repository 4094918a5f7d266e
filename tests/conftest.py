import pytest

from sheet_merger.application.mapping_configuration_use_case import (
    MappingConfigurationUseCase,
    MappingDependencies,
)
from sheet_merger.domain.entities.mapping import (
    FieldCorrespondence,
    MappingConfiguration,
    SourceFieldRef,
    TargetFieldDescriptor,
)
from sheet_merger.infrastructure.logging import NullLogger
from sheet_merger.infrastructure.repositories import (
    DocumentStoreFileCompletion,
    DocumentStoreRequiredFieldsProvider,
    MappingConfigurationRepository,
)
from sheet_merger.infrastructure.storage import MemoryDocumentStore


def make_configuration(
    *target_names: str,
    config_id: str = "mapping_test",
    name: str = "Test",
    updated_at: int = 1_000,
) -> MappingConfiguration:
    """Configuration with one unbound correspondence per target name."""
    return MappingConfiguration(
        id=config_id,
        name=name,
        created_at=updated_at,
        updated_at=updated_at,
        correspondences=[
            FieldCorrespondence(
                id=f"fieldmap_{index}", target=TargetFieldDescriptor(name=target)
            )
            for index, target in enumerate(target_names)
        ],
    )


def ref(field_name: str, file_id: str = "file1", sheet_name: str = "Sheet1") -> SourceFieldRef:
    return SourceFieldRef(file_id=file_id, sheet_name=sheet_name, field_name=field_name)


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def use_case(store: MemoryDocumentStore) -> MappingConfigurationUseCase:
    dependencies = MappingDependencies(
        logger=NullLogger(),
        repository=MappingConfigurationRepository(store),
        required_fields=DocumentStoreRequiredFieldsProvider(store),
        file_completion=DocumentStoreFileCompletion(store),
    )
    return MappingConfigurationUseCase(dependencies)
