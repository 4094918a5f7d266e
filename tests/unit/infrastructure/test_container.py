"""Tests for the dependency injection container.

These tests verify the container creates and wires up dependencies as
singletons, passes configuration through, and supports test overrides.
"""

from pathlib import Path

from rich.console import Console

from sheet_merger.application.mapping_configuration_use_case import (
    MappingConfigurationUseCase,
)
from sheet_merger.config import MergerConfig
from sheet_merger.infrastructure.container import (
    DependencyContainer,
    create_default_container,
)
from sheet_merger.infrastructure.io import PandasSpreadsheetReader
from sheet_merger.infrastructure.logging import ConsoleLogger, NullLogger
from sheet_merger.infrastructure.repositories import (
    DocumentStoreRequiredFieldsProvider,
    MappingConfigurationRepository,
)
from sheet_merger.infrastructure.storage import (
    JsonFileDocumentStore,
    MemoryDocumentStore,
)


class MockLogger:
    """Mock logger for testing overrides."""

    def __init__(self):
        self.messages = []

    def info(self, message):
        self.messages.append(("info", message))

    def success(self, message):
        self.messages.append(("success", message))

    def warning(self, message):
        self.messages.append(("warning", message))

    def error(self, message):
        self.messages.append(("error", message))

    def debug(self, message):
        self.messages.append(("debug", message))

    def verbose(self, message):
        self.messages.append(("verbose", message))

    def log_auto_map_stage(self, stage, bindings):
        pass

    def log_auto_map_complete(self, file_id, sheet_name, result):
        self.messages.append(("auto_map", f"{file_id}/{sheet_name}"))

    def log_binding(self, operation, target_name, field_name):
        self.messages.append((operation, f"{field_name}->{target_name}"))


class TestDependencyContainer:
    """Tests for DependencyContainer construction."""

    def test_create_container_with_defaults(self):
        container = DependencyContainer()

        assert container.verbose == 0
        assert container.console is not None
        assert container.use_null_logger is False
        assert container.config == MergerConfig()

    def test_create_container_with_custom_console(self):
        custom_console = Console()
        container = DependencyContainer(console=custom_console)

        assert container.console is custom_console

    def test_create_default_container(self):
        config = MergerConfig(similarity_threshold=0.8)

        container = create_default_container(config=config, verbose=1)

        assert container.config is config
        assert container.verbose == 1


class TestFactories:
    """Tests for factory methods."""

    def test_logger_kinds(self):
        assert isinstance(DependencyContainer().create_logger(), ConsoleLogger)
        assert isinstance(
            DependencyContainer(use_null_logger=True).create_logger(), NullLogger
        )

    def test_console_logger_gets_verbosity(self):
        logger = DependencyContainer(verbose=2).create_logger()

        assert isinstance(logger, ConsoleLogger)
        assert logger.verbosity == 2

    def test_in_memory_store(self):
        container = DependencyContainer(in_memory=True)

        assert isinstance(container.create_document_store(), MemoryDocumentStore)

    def test_file_store_uses_storage_dir(self, tmp_path: Path):
        container = DependencyContainer(config=MergerConfig(storage_dir=tmp_path))

        store = container.create_document_store()

        assert isinstance(store, JsonFileDocumentStore)
        assert store.directory == tmp_path

    def test_required_fields_defaults_from_config(self):
        container = DependencyContainer(
            config=MergerConfig(required_fields=("Name", "Email")), in_memory=True
        )

        provider = container.create_required_fields_provider()

        assert isinstance(provider, DocumentStoreRequiredFieldsProvider)
        assert provider.get_required_field_names() == ["Name", "Email"]

    def test_singletons(self):
        container = DependencyContainer(in_memory=True, use_null_logger=True)

        assert container.create_logger() is container.create_logger()
        assert container.create_repository() is container.create_repository()
        assert isinstance(container.create_repository(), MappingConfigurationRepository)
        assert (
            container.create_spreadsheet_reader()
            is container.create_spreadsheet_reader()
        )
        assert container.create_mapping_use_case() is container.create_mapping_use_case()

    def test_use_case_is_wired(self):
        container = DependencyContainer(in_memory=True, use_null_logger=True)

        use_case = container.create_mapping_use_case()

        assert isinstance(use_case, MappingConfigurationUseCase)
        config = use_case.create_configuration("Customers", target_names=["Name"])
        assert container.create_repository().get(config.id) is not None

    def test_reset_singletons(self):
        container = DependencyContainer(in_memory=True, use_null_logger=True)
        first = container.create_mapping_use_case()

        container.reset_singletons()

        assert container.create_mapping_use_case() is not first


class TestOverrides:
    """Tests for testing overrides."""

    def test_override_logger(self):
        container = DependencyContainer(in_memory=True)
        logger = MockLogger()
        container.override_logger(logger)

        use_case = container.create_mapping_use_case()
        use_case.create_configuration("Customers")

        assert ("success", "Created mapping configuration 'Customers'") in logger.messages

    def test_override_document_store(self):
        container = DependencyContainer(use_null_logger=True)
        store = MemoryDocumentStore()
        container.override_document_store(store)

        container.create_mapping_use_case().create_configuration("Customers")

        assert store.has("mapping_configs")

    def test_override_spreadsheet_reader(self):
        container = DependencyContainer(in_memory=True)
        reader = PandasSpreadsheetReader()
        container.override_spreadsheet_reader(reader)

        assert container.create_spreadsheet_reader() is reader
