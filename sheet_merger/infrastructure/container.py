from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from ..application.mapping_configuration_use_case import (
    MappingConfigurationUseCase,
    MappingDependencies,
)
from ..config import MergerConfig
from .io.spreadsheet_reader import PandasSpreadsheetReader
from .logging.console_logger import ConsoleLogger
from .logging.null_logger import NullLogger
from .repositories.file_completion_store import DocumentStoreFileCompletion
from .repositories.mapping_configuration_repository import (
    MappingConfigurationRepository,
)
from .repositories.required_fields_provider import (
    DocumentStoreRequiredFieldsProvider,
)
from .storage.json_file_store import JsonFileDocumentStore
from .storage.memory_store import MemoryDocumentStore

if TYPE_CHECKING:
    from ..application.ports.repositories import (
        DocumentStorePort,
        FileCompletionPort,
        MappingConfigurationRepositoryPort,
        RequiredFieldsProviderPort,
    )
    from ..application.ports.services import LoggerPort, SpreadsheetReaderPort


class DependencyContainer:
    pass

    def __init__(
        self,
        config: MergerConfig | None = None,
        verbose: int = 0,
        console: Console | None = None,
        use_null_logger: bool = False,
        in_memory: bool = False,
    ) -> None:
        super().__init__()
        self.config = config or MergerConfig()
        self.verbose = verbose
        self.console = console or Console()
        self.use_null_logger = use_null_logger
        self.in_memory = in_memory
        self._logger_instance: LoggerPort | None = None
        self._document_store_instance: DocumentStorePort | None = None
        self._repository_instance: MappingConfigurationRepositoryPort | None = None
        self._required_fields_instance: RequiredFieldsProviderPort | None = None
        self._file_completion_instance: FileCompletionPort | None = None
        self._spreadsheet_reader_instance: SpreadsheetReaderPort | None = None
        self._use_case_instance: MappingConfigurationUseCase | None = None

    def create_logger(self) -> LoggerPort:
        if self._logger_instance is None:
            if self.use_null_logger:
                self._logger_instance = NullLogger()
            else:
                self._logger_instance = ConsoleLogger(
                    console=self.console, verbosity=self.verbose
                )
        return self._logger_instance

    def create_document_store(self) -> DocumentStorePort:
        if self._document_store_instance is None:
            if self.in_memory:
                self._document_store_instance = MemoryDocumentStore()
            else:
                self._document_store_instance = JsonFileDocumentStore(
                    Path(self.config.storage_dir)
                )
        return self._document_store_instance

    def create_repository(self) -> MappingConfigurationRepositoryPort:
        if self._repository_instance is None:
            self._repository_instance = MappingConfigurationRepository(
                self.create_document_store(),
                placeholder_prefixes=self.config.placeholder_prefixes,
                logger=self.create_logger(),
            )
        return self._repository_instance

    def create_required_fields_provider(self) -> RequiredFieldsProviderPort:
        if self._required_fields_instance is None:
            self._required_fields_instance = DocumentStoreRequiredFieldsProvider(
                self.create_document_store(), defaults=self.config.required_fields
            )
        return self._required_fields_instance

    def create_file_completion(self) -> FileCompletionPort:
        if self._file_completion_instance is None:
            self._file_completion_instance = DocumentStoreFileCompletion(
                self.create_document_store()
            )
        return self._file_completion_instance

    def create_spreadsheet_reader(self) -> SpreadsheetReaderPort:
        if self._spreadsheet_reader_instance is None:
            self._spreadsheet_reader_instance = PandasSpreadsheetReader()
        return self._spreadsheet_reader_instance

    def create_mapping_use_case(self) -> MappingConfigurationUseCase:
        if self._use_case_instance is None:
            dependencies = MappingDependencies(
                logger=self.create_logger(),
                repository=self.create_repository(),
                required_fields=self.create_required_fields_provider(),
                file_completion=self.create_file_completion(),
                spreadsheet_reader=self.create_spreadsheet_reader(),
            )
            self._use_case_instance = MappingConfigurationUseCase(
                dependencies,
                similarity_threshold=self.config.similarity_threshold,
                assignment_threshold=self.config.assignment_threshold,
                history_enabled=self.config.history_enabled,
                placeholder_prefixes=self.config.placeholder_prefixes,
            )
        return self._use_case_instance

    def reset_singletons(self) -> None:
        self._logger_instance = None
        self._document_store_instance = None
        self._repository_instance = None
        self._required_fields_instance = None
        self._file_completion_instance = None
        self._spreadsheet_reader_instance = None
        self._use_case_instance = None

    def override_logger(self, logger: LoggerPort) -> None:
        self._logger_instance = logger

    def override_document_store(self, store: DocumentStorePort) -> None:
        self._document_store_instance = store

    def override_spreadsheet_reader(self, reader: SpreadsheetReaderPort) -> None:
        self._spreadsheet_reader_instance = reader


def create_default_container(
    config: MergerConfig | None = None, verbose: int = 0
) -> DependencyContainer:
    return DependencyContainer(config=config, verbose=verbose)
