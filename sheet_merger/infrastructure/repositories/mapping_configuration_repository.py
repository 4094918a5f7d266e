from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, override

from pydantic import ValidationError

from ...application.ports.repositories import MappingConfigurationRepositoryPort
from ...constants import Placeholders, StorageKeys
from ...domain.entities.mapping import (
    FieldCorrespondence,
    MappingConfiguration,
    SourceFieldRef,
    is_placeholder_name,
    new_configuration_id,
    new_correspondence_id,
)
from ...domain.services.matching.normalizer import normalize_field_name
from ..io.exceptions import DataParseError, DataSourceError
from .schema_migration import MigrationError, migrate_configuration_document

if TYPE_CHECKING:
    from ...application.ports.repositories import DocumentStorePort, JSONValue
    from ...application.ports.services import LoggerPort


class MappingConfigLoadError(DataParseError):
    pass


class MappingConfigSaveError(DataParseError):
    pass


def parse_configuration(
    document: object,
    placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
    on_repair: Callable[[str], None] | None = None,
) -> MappingConfiguration:
    """Migrate, validate and clean one stored configuration document.

    Raises MappingConfigLoadError when the document cannot be read.
    """
    try:
        migrated = migrate_configuration_document(document)
        config = MappingConfiguration.model_validate(migrated)
    except (MigrationError, ValidationError) as exc:
        raise MappingConfigLoadError(f"Invalid mapping configuration: {exc}") from exc
    return clean_configuration(config, placeholder_prefixes, on_repair)


def clean_configuration(
    config: MappingConfiguration,
    placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
    on_repair: Callable[[str], None] | None = None,
) -> MappingConfiguration:
    """Drop placeholder targets and repeated ids, then restore the invariants.

    Targets whose names normalize the same are merged into the first one.
    A source keeps only its first owner and is listed once per target.
    Each repair is reported through ``on_repair``.
    """
    prefixes = tuple(placeholder_prefixes)

    def report(message: str) -> None:
        if on_repair is not None:
            on_repair(f"{config.id}: {message}")

    if not config.id:
        config.id = new_configuration_id()
    seen_ids: set[str] = set()
    by_name: dict[str, FieldCorrespondence] = {}
    owners: dict[SourceFieldRef, str] = {}
    kept: list[FieldCorrespondence] = []
    for correspondence in config.correspondences:
        if is_placeholder_name(correspondence.target.name, prefixes):
            continue
        if not correspondence.id:
            correspondence.id = new_correspondence_id()
        if correspondence.id in seen_ids:
            continue
        seen_ids.add(correspondence.id)

        key = normalize_field_name(correspondence.target.name)
        target = by_name.get(key)
        if target is None:
            target = correspondence.model_copy(update={"sources": []})
            by_name[key] = target
            kept.append(target)
        else:
            report(
                f"merged target '{correspondence.target.name}' into "
                + f"'{target.target.name}'"
            )

        for ref in correspondence.sources:
            owner = owners.get(ref)
            if owner is None:
                owners[ref] = target.id
                target.sources.append(ref)
            elif owner == target.id:
                report(f"dropped repeated source {ref.key()} on {target.id}")
            else:
                report(
                    f"dropped source {ref.key()} from {target.id}, already bound to {owner}"
                )
    config.correspondences = kept
    return config


def dump_configuration(config: MappingConfiguration) -> dict[str, Any]:
    return config.model_dump(mode="json")


class MappingConfigurationRepository(MappingConfigurationRepositoryPort):
    """Configuration collection persisted under a single document key.

    The collection is read once, migrated and cleaned. Afterwards the
    in-memory copy is authoritative: a failed save keeps the change in
    memory and raises MappingConfigSaveError so the caller can retry.
    """

    def __init__(
        self,
        store: DocumentStorePort,
        *,
        placeholder_prefixes: Iterable[str] = Placeholders.PREFIXES,
        logger: LoggerPort | None = None,
    ) -> None:
        super().__init__()
        self._store = store
        self._placeholder_prefixes = tuple(placeholder_prefixes)
        self._logger = logger
        self._configurations: dict[str, MappingConfiguration] | None = None

    @override
    def list_all(self) -> list[MappingConfiguration]:
        return [c.model_copy(deep=True) for c in self._collection().values()]

    @override
    def get(self, configuration_id: str) -> MappingConfiguration | None:
        config = self._collection().get(configuration_id)
        return None if config is None else config.model_copy(deep=True)

    @override
    def save(self, configuration: MappingConfiguration) -> None:
        self._collection()[configuration.id] = configuration.model_copy(deep=True)
        self._persist()

    @override
    def delete(self, configuration_id: str) -> bool:
        collection = self._collection()
        if configuration_id not in collection:
            return False
        was_active = self.get_active_id() == configuration_id
        del collection[configuration_id]
        if was_active:
            self.set_active_id(None)
        self._persist()
        return True

    @override
    def get_active_id(self) -> str | None:
        try:
            value = self._store.load(StorageKeys.ACTIVE_CONFIGURATION)
        except DataSourceError as exc:
            raise MappingConfigLoadError(
                f"Failed to load active configuration: {exc}"
            ) from exc
        if isinstance(value, str) and value in self._collection():
            return value
        return None

    @override
    def set_active_id(self, configuration_id: str | None) -> None:
        try:
            if configuration_id is None:
                self._store.delete(StorageKeys.ACTIVE_CONFIGURATION)
            else:
                self._store.save(StorageKeys.ACTIVE_CONFIGURATION, configuration_id)
        except DataSourceError as exc:
            raise MappingConfigSaveError(
                f"Failed to save active configuration: {exc}"
            ) from exc

    def reload(self) -> None:
        self._configurations = None

    def _collection(self) -> dict[str, MappingConfiguration]:
        if self._configurations is None:
            self._configurations = self._load()
        return self._configurations

    def _load(self) -> dict[str, MappingConfiguration]:
        try:
            raw = self._store.load(StorageKeys.CONFIGURATIONS)
        except DataSourceError as exc:
            raise MappingConfigLoadError(
                f"Failed to load mapping configurations: {exc}"
            ) from exc
        if raw is None:
            return {}
        if not isinstance(raw, list):
            raise MappingConfigLoadError(
                f"Stored mapping configurations must be a list, got {type(raw).__name__}"
            )
        configurations: dict[str, MappingConfiguration] = {}
        for index, document in enumerate(raw):
            try:
                config = parse_configuration(
                    document, self._placeholder_prefixes, on_repair=self._warn
                )
            except MappingConfigLoadError as exc:
                self._warn(f"Skipping stored configuration #{index}: {exc}")
                continue
            if config.id in configurations:
                self._warn(f"Skipping duplicate configuration id {config.id}")
                continue
            configurations[config.id] = config
        return configurations

    def _persist(self) -> None:
        payload: JSONValue = [
            dump_configuration(c) for c in self._collection().values()
        ]
        try:
            self._store.save(StorageKeys.CONFIGURATIONS, payload)
        except DataSourceError as exc:
            raise MappingConfigSaveError(
                f"Failed to save mapping configurations: {exc}"
            ) from exc

    def _warn(self, message: str) -> None:
        if self._logger is not None:
            self._logger.warning(message)
