from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.mapping import MappingConfiguration

type JSONValue = (
    dict[str, JSONValue] | list[JSONValue] | str | int | float | bool | None
)


@runtime_checkable
class DocumentStorePort(Protocol):
    pass

    def load(self, key: str) -> JSONValue: ...

    def save(self, key: str, value: JSONValue) -> None: ...

    def delete(self, key: str) -> None: ...


@runtime_checkable
class MappingConfigurationRepositoryPort(Protocol):
    pass

    def list_all(self) -> list[MappingConfiguration]: ...

    def get(self, configuration_id: str) -> MappingConfiguration | None: ...

    def save(self, configuration: MappingConfiguration) -> None: ...

    def delete(self, configuration_id: str) -> bool: ...

    def get_active_id(self) -> str | None: ...

    def set_active_id(self, configuration_id: str | None) -> None: ...


@runtime_checkable
class RequiredFieldsProviderPort(Protocol):
    pass

    def get_required_field_names(self) -> list[str]: ...


@runtime_checkable
class RequiredFieldsEditorPort(RequiredFieldsProviderPort, Protocol):
    pass

    def set_required_field_names(self, names: list[str]) -> None: ...


@runtime_checkable
class FileCompletionPort(Protocol):
    pass

    def set_file_complete(
        self, file_id: str, sheet_name: str, complete: bool
    ) -> None: ...

    def is_marked_complete(self, file_id: str, sheet_name: str) -> bool | None: ...
