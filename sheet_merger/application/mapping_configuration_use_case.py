"""Mapping configuration use case.

Every operation takes an explicit configuration id. Mutations run as a
read-modify-write of one configuration under that configuration's lock:
the stored copy is loaded, edited, re-checked against the invariants and
saved once. A failed edit raises before anything is saved, so the stored
configuration is either fully updated or untouched.

Successful mutations refresh the per-file completion flags for the affected
sheets and notify subscribers with a ConfigurationChanged event.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
import threading
from typing import TYPE_CHECKING

from ..constants import Defaults, Placeholders
from ..domain.entities.mapping import (
    MappingConfiguration,
    SourceFieldRef,
    TargetFieldDescriptor,
    new_configuration_id,
    new_correspondence_id,
    visible_correspondences,
)
from ..domain.exceptions import (
    ConfigurationNotFoundError,
    MappingEngineError,
    StructuralError,
)
from ..domain.services.completion_tracker import (
    completion_status,
    is_file_complete,
    unmapped_columns,
)
from ..domain.services.correspondence_editor import CorrespondenceEditor
from ..domain.services.matching.history_advisor import HistoryAdvisor
from ..domain.services.matching.normalizer import normalize_field_name
from ..domain.services.matching.resolver import AutoMapStage, CorrespondenceResolver
from ..domain.services.merge_service import SheetData, build_merge_preview
from ..domain.services.type_compatibility import (
    infer_column_type,
    validate_source_types,
)
from ..domain.services.validation_service import MappingValidator
from .models import AutoMapResponse, ConfigurationChanged, FileStatus, ImportSummary
from .ports.repositories import RequiredFieldsEditorPort

if TYPE_CHECKING:
    import pandas as pd

    from ..domain.entities.mapping import DataType, FieldCorrespondence
    from ..domain.entities.validation import ValidationResult
    from .ports.repositories import (
        FileCompletionPort,
        MappingConfigurationRepositoryPort,
        RequiredFieldsProviderPort,
    )
    from .ports.services import LoggerPort, SpreadsheetReaderPort

type ChangeListener = Callable[[ConfigurationChanged], None]
type Mutation[T] = Callable[[MappingConfiguration], T]


@dataclass(slots=True)
class MappingDependencies:
    logger: LoggerPort
    repository: MappingConfigurationRepositoryPort
    required_fields: RequiredFieldsProviderPort
    file_completion: FileCompletionPort | None = None
    spreadsheet_reader: SpreadsheetReaderPort | None = None


class MappingConfigurationUseCase:
    """Operations on mapping configurations for the UI layer.

    Example:
        >>> use_case = MappingConfigurationUseCase(dependencies)
        >>> config = use_case.create_configuration("Customers", target_names=["Name"])
        >>> response = use_case.auto_map(config.id, "jan.xlsx", "Sheet1", ["name"])
        >>> response.new_bindings
        1
    """

    def __init__(
        self,
        dependencies: MappingDependencies,
        *,
        similarity_threshold: float = Defaults.SIMILARITY_THRESHOLD,
        assignment_threshold: float = Defaults.ASSIGNMENT_THRESHOLD,
        history_enabled: bool = Defaults.HISTORY_ENABLED,
        placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
    ) -> None:
        super().__init__()
        self.logger = dependencies.logger
        self._repository = dependencies.repository
        self._required_fields = dependencies.required_fields
        self._file_completion = dependencies.file_completion
        self._reader = dependencies.spreadsheet_reader
        self._placeholder_prefixes = tuple(placeholder_prefixes)
        self._editor = CorrespondenceEditor(self._placeholder_prefixes)
        self._validator = MappingValidator(self._placeholder_prefixes)
        self._resolver = CorrespondenceResolver(
            similarity_threshold=similarity_threshold,
            assignment_threshold=assignment_threshold,
            history_advisor=(
                HistoryAdvisor(self._placeholder_prefixes) if history_enabled else None
            ),
            editor=self._editor,
        )
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._listeners: list[ChangeListener] = []

    # Notifications

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener`` for change events. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: ConfigurationChanged) -> None:
        for listener in list(self._listeners):
            listener(event)

    # Configuration lifecycle

    def list_configurations(self) -> list[MappingConfiguration]:
        return self._repository.list_all()

    def get_configuration(self, configuration_id: str) -> MappingConfiguration:
        config = self._repository.get(configuration_id)
        if config is None:
            raise ConfigurationNotFoundError(configuration_id)
        return config

    def create_configuration(
        self,
        name: str,
        description: str = "",
        target_names: Iterable[str] = (),
    ) -> MappingConfiguration:
        config = MappingConfiguration(
            id=new_configuration_id(), name=name.strip(), description=description
        )
        for target_name in target_names:
            self._editor.add_target(config, TargetFieldDescriptor(name=target_name))
        with self._lock(config.id):
            self._repository.save(config)
        self.logger.success(f"Created mapping configuration '{config.name}'")
        self._notify(ConfigurationChanged(config.id, "create", config.updated_at))
        return config.model_copy(deep=True)

    def update_configuration(
        self,
        configuration_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> MappingConfiguration:
        def _update(config: MappingConfiguration) -> None:
            changed = False
            if name is not None and name.strip() != config.name:
                config.name = name.strip()
                changed = True
            if description is not None and description != config.description:
                config.description = description
                changed = True
            if changed:
                config.touch()

        config, _ = self._mutate(configuration_id, "update", _update)
        return config

    def delete_configuration(self, configuration_id: str) -> None:
        with self._lock(configuration_id):
            if not self._repository.delete(configuration_id):
                raise ConfigurationNotFoundError(configuration_id)
        with self._locks_guard:
            self._locks.pop(configuration_id, None)
        self.logger.info(f"Deleted mapping configuration {configuration_id}")
        self._notify(ConfigurationChanged(configuration_id, "delete", None))

    def get_active_configuration_id(self) -> str | None:
        return self._repository.get_active_id()

    def set_active_configuration(self, configuration_id: str | None) -> None:
        if configuration_id is not None:
            self.get_configuration(configuration_id)
        self._repository.set_active_id(configuration_id)

    # Target fields

    def add_target(
        self, configuration_id: str, descriptor: TargetFieldDescriptor
    ) -> FieldCorrespondence:
        _, correspondence = self._mutate(
            configuration_id,
            "add_target",
            lambda config: self._editor.add_target(config, descriptor),
            affect_all_sheets=True,
        )
        return correspondence

    def remove_target(
        self, configuration_id: str, correspondence_id: str
    ) -> FieldCorrespondence:
        _, correspondence = self._mutate(
            configuration_id,
            "remove_target",
            lambda config: self._editor.remove_target(config, correspondence_id),
            affect_all_sheets=True,
        )
        return correspondence

    def rename_target(
        self, configuration_id: str, correspondence_id: str, new_name: str
    ) -> FieldCorrespondence:
        _, correspondence = self._mutate(
            configuration_id,
            "rename_target",
            lambda config: self._editor.rename_target(
                config, correspondence_id, new_name
            ),
        )
        return correspondence

    def update_target(
        self,
        configuration_id: str,
        correspondence_id: str,
        *,
        description: str | None = None,
        data_type: DataType | None = None,
        required: bool | None = None,
    ) -> FieldCorrespondence:
        _, correspondence = self._mutate(
            configuration_id,
            "update_target",
            lambda config: self._editor.update_target(
                config,
                correspondence_id,
                description=description,
                data_type=data_type,
                required=required,
            ),
        )
        return correspondence

    # Bindings

    def bind(
        self, configuration_id: str, correspondence_id: str, ref: SourceFieldRef
    ) -> MappingConfiguration:
        def _bind(config: MappingConfiguration) -> bool:
            changed = self._editor.bind(config, correspondence_id, ref)
            if changed:
                target = self._editor.require(config, correspondence_id).target
                self.logger.log_binding("bind", target.name, ref.field_name)
            return changed

        config, _ = self._mutate(
            configuration_id,
            "bind",
            _bind,
            affected=[(ref.file_id, ref.sheet_name)],
        )
        return config

    def unbind(
        self, configuration_id: str, correspondence_id: str, ref: SourceFieldRef
    ) -> MappingConfiguration:
        def _unbind(config: MappingConfiguration) -> bool:
            changed = self._editor.unbind(config, correspondence_id, ref)
            if changed:
                target = self._editor.require(config, correspondence_id).target
                self.logger.log_binding("unbind", target.name, ref.field_name)
            return changed

        config, _ = self._mutate(
            configuration_id,
            "unbind",
            _unbind,
            affected=[(ref.file_id, ref.sheet_name)],
        )
        return config

    def auto_map(
        self,
        configuration_id: str,
        file_id: str,
        sheet_name: str,
        columns: Sequence[str] | None = None,
    ) -> AutoMapResponse:
        """Run the multi-stage resolver for one file/sheet and publish it once.

        When ``columns`` is None they are read through the spreadsheet reader.
        """
        if columns is None and self._reader is not None:
            columns = self._reader.read_columns(file_id, sheet_name)

        with self._lock(configuration_id):
            current = self.get_configuration(configuration_id)
            past = (
                self._repository.list_all()
                if self._resolver.history_advisor is not None
                else []
            )
            result = self._resolver.auto_map(
                current, file_id, sheet_name, columns, past
            )
            for stage in AutoMapStage:
                self.logger.log_auto_map_stage(stage.value, result.by_stage(stage))
            if result.bindings:
                self._editor.check_invariants(result.configuration)
                self._repository.save(result.configuration)
        self.logger.log_auto_map_complete(file_id, sheet_name, result)

        complete = is_file_complete(
            result.configuration, file_id, sheet_name, self._placeholder_prefixes
        )
        if result.bindings:
            self._after_change(
                result.configuration, "auto_map", [(file_id, sheet_name)]
            )
        return AutoMapResponse(
            configuration=result.configuration,
            file_id=file_id,
            sheet_name=sheet_name,
            bindings=result.bindings,
            is_complete=complete,
        )

    # Validation and status

    def required_target_names(
        self, configuration: MappingConfiguration | None = None
    ) -> list[str]:
        """Provider names plus targets flagged required on ``configuration``."""
        names = list(self._required_fields.get_required_field_names())
        keys = {normalize_field_name(n) for n in names}
        if configuration is not None:
            for correspondence in visible_correspondences(
                configuration, self._placeholder_prefixes
            ):
                target = correspondence.target
                key = normalize_field_name(target.name)
                if target.required and key not in keys:
                    keys.add(key)
                    names.append(target.name)
        return names

    def validate(
        self,
        configuration_id: str,
        *,
        sheets: Iterable[tuple[str, str]] = (),
    ) -> ValidationResult:
        """Validate a configuration; ``sheets`` adds unused-column and type checks."""
        config = self.get_configuration(configuration_id)
        result = self._validator.validate(config, self.required_target_names(config))
        sheets = list(sheets)
        if sheets and self._reader is not None:
            columns = {
                (file_id, sheet): self._reader.read_columns(file_id, sheet)
                for file_id, sheet in sheets
            }
            result.extend(self._validator.unused_columns(config, columns))
            for file_id, sheet in sheets:
                result.extend(self.check_source_types(configuration_id, file_id, sheet))
        return result

    def validate_correspondence(
        self, configuration_id: str, correspondence_id: str
    ) -> ValidationResult:
        config = self.get_configuration(configuration_id)
        correspondence = self._editor.require(config, correspondence_id)
        required = {
            normalize_field_name(n) for n in self.required_target_names(config)
        }
        return self._validator.validate_correspondence(
            correspondence,
            is_required=normalize_field_name(correspondence.target.name) in required,
        )

    def check_source_types(
        self, configuration_id: str, file_id: str, sheet_name: str
    ) -> ValidationResult:
        config = self.get_configuration(configuration_id)
        if self._reader is None:
            return validate_source_types(config, {}, self._placeholder_prefixes)
        rows = self._reader.read_rows(file_id, sheet_name).head(
            Defaults.TYPE_SAMPLE_ROWS
        )
        column_types = {
            SourceFieldRef(file_id=file_id, sheet_name=sheet_name, field_name=str(c)): (
                infer_column_type(rows[c].tolist())
            )
            for c in rows.columns
        }
        return validate_source_types(config, column_types, self._placeholder_prefixes)

    def is_file_complete(
        self, configuration_id: str, file_id: str, sheet_name: str
    ) -> bool:
        config = self.get_configuration(configuration_id)
        return is_file_complete(
            config, file_id, sheet_name, self._placeholder_prefixes
        )

    def file_status(
        self,
        configuration_id: str,
        file_id: str,
        sheet_name: str,
        columns: Sequence[str] | None = None,
    ) -> FileStatus:
        config = self.get_configuration(configuration_id)
        if columns is None and self._reader is not None:
            columns = self._reader.read_columns(file_id, sheet_name)
        return FileStatus(
            completion=completion_status(
                config, file_id, sheet_name, self._placeholder_prefixes
            ),
            unmapped_columns=unmapped_columns(
                config, file_id, sheet_name, columns or []
            ),
        )

    def merge_preview(
        self,
        configuration_id: str,
        sheets: Iterable[tuple[str, str]],
        *,
        include_provenance: bool = True,
    ) -> pd.DataFrame:
        if self._reader is None:
            raise MappingEngineError("Merge preview needs a spreadsheet reader")
        config = self.get_configuration(configuration_id)
        reader = self._reader
        data = [
            SheetData(file_id, sheet, reader.read_rows(file_id, sheet))
            for file_id, sheet in sheets
        ]
        return build_merge_preview(
            config,
            data,
            include_provenance=include_provenance,
            placeholder_prefixes=self._placeholder_prefixes,
        )

    # Required fields list

    def add_required_field(self, name: str) -> list[str]:
        editor = self._required_fields_editor()
        names = editor.get_required_field_names()
        key = normalize_field_name(name)
        if key and all(normalize_field_name(n) != key for n in names):
            names.append(name.strip())
            editor.set_required_field_names(names)
        return editor.get_required_field_names()

    def remove_required_field(self, name: str) -> list[str]:
        editor = self._required_fields_editor()
        key = normalize_field_name(name)
        names = [
            n for n in editor.get_required_field_names() if normalize_field_name(n) != key
        ]
        editor.set_required_field_names(names)
        return editor.get_required_field_names()

    def _required_fields_editor(self) -> RequiredFieldsEditorPort:
        provider = self._required_fields
        if not isinstance(provider, RequiredFieldsEditorPort):
            raise MappingEngineError("The required fields list is read-only")
        return provider

    # Import / export

    def import_configurations(
        self, configurations: Iterable[MappingConfiguration]
    ) -> ImportSummary:
        """Store copies of ``configurations`` under fresh ids.

        Entries that break an invariant are skipped and reported.
        """
        summary = ImportSummary(imported=[])
        for incoming in configurations:
            config = incoming.model_copy(deep=True)
            config.id = new_configuration_id()
            for correspondence in config.correspondences:
                correspondence.id = new_correspondence_id()
            try:
                self._editor.check_invariants(config)
            except StructuralError as e:
                summary.skipped += 1
                summary.errors.append(f"{incoming.name or incoming.id}: {e}")
                self.logger.warning(f"Skipped import of '{incoming.name}': {e}")
                continue
            with self._lock(config.id):
                self._repository.save(config)
            summary.imported.append(config)
            self._notify(ConfigurationChanged(config.id, "import", config.updated_at))
        self.logger.success(
            f"Imported {len(summary.imported)} configuration(s), skipped {summary.skipped}"
        )
        return summary

    def export_configurations(
        self, configuration_ids: Iterable[str] | None = None
    ) -> list[MappingConfiguration]:
        if configuration_ids is None:
            return self.list_configurations()
        return [self.get_configuration(cid) for cid in configuration_ids]

    # Internals

    def _lock(self, configuration_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(configuration_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[configuration_id] = lock
            return lock

    def _mutate[T](
        self,
        configuration_id: str,
        operation: str,
        mutation: Mutation[T],
        *,
        affected: Sequence[tuple[str, str]] = (),
        affect_all_sheets: bool = False,
    ) -> tuple[MappingConfiguration, T]:
        with self._lock(configuration_id):
            config = self.get_configuration(configuration_id)
            before = config.updated_at
            sheets = list(affected)
            if affect_all_sheets:
                sheets = _referenced_sheets(config)
            outcome = mutation(config)
            changed = config.updated_at != before
            if changed:
                self._editor.check_invariants(config)
                self._repository.save(config)
        if changed:
            if affect_all_sheets:
                sheets = list(dict.fromkeys([*sheets, *_referenced_sheets(config)]))
            self._after_change(config, operation, sheets)
        return config, outcome

    def _after_change(
        self,
        config: MappingConfiguration,
        operation: str,
        sheets: Sequence[tuple[str, str]],
    ) -> None:
        if self._file_completion is not None:
            for file_id, sheet in sheets:
                self._file_completion.set_file_complete(
                    file_id,
                    sheet,
                    is_file_complete(config, file_id, sheet, self._placeholder_prefixes),
                )
        self.logger.debug(f"{operation} on {config.id} at {config.updated_at}")
        self._notify(
            ConfigurationChanged(
                configuration_id=config.id,
                operation=operation,
                updated_at=config.updated_at,
                affected_sheets=tuple(sheets),
            )
        )


def _referenced_sheets(config: MappingConfiguration) -> list[tuple[str, str]]:
    sheets: dict[tuple[str, str], None] = {}
    for correspondence in config.correspondences:
        for ref in correspondence.sources:
            sheets[(ref.file_id, ref.sheet_name)] = None
    return list(sheets)
