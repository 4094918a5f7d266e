from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, override

from ...application.ports.repositories import (
    RequiredFieldsEditorPort,
    RequiredFieldsProviderPort,
)
from ...constants import StorageKeys
from ..io.exceptions import DataSourceError
from .mapping_configuration_repository import MappingConfigSaveError

if TYPE_CHECKING:
    from ...application.ports.repositories import DocumentStorePort


def _unique_names(names: Iterable[str]) -> list[str]:
    out: list[str] = []
    for name in names:
        cleaned = str(name).strip()
        if cleaned and cleaned not in out:
            out.append(cleaned)
    return out


class StaticRequiredFieldsProvider(RequiredFieldsProviderPort):
    pass

    def __init__(self, names: Iterable[str] = ()) -> None:
        super().__init__()
        self._names = _unique_names(names)

    @override
    def get_required_field_names(self) -> list[str]:
        return list(self._names)


class DocumentStoreRequiredFieldsProvider(RequiredFieldsEditorPort):
    """Persisted, editable list of required target names.

    Falls back to ``defaults`` until a list has been saved.
    """

    def __init__(self, store: DocumentStorePort, defaults: Iterable[str] = ()) -> None:
        super().__init__()
        self._store = store
        self._defaults = _unique_names(defaults)

    @override
    def get_required_field_names(self) -> list[str]:
        value = self._store.load(StorageKeys.REQUIRED_FIELDS)
        if not isinstance(value, list):
            return list(self._defaults)
        return _unique_names(str(item) for item in value if item is not None)

    @override
    def set_required_field_names(self, names: list[str]) -> None:
        try:
            self._store.save(StorageKeys.REQUIRED_FIELDS, _unique_names(names))
        except DataSourceError as exc:
            raise MappingConfigSaveError(
                f"Failed to save required fields: {exc}"
            ) from exc
