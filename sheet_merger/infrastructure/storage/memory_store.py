import copy
from typing import override

from ...application.ports.repositories import DocumentStorePort, JSONValue


class MemoryDocumentStore(DocumentStorePort):
    """Dict-backed store. Values are copied in and out."""

    def __init__(self, initial: dict[str, JSONValue] | None = None) -> None:
        super().__init__()
        self._store: dict[str, JSONValue] = copy.deepcopy(initial or {})

    @override
    def load(self, key: str) -> JSONValue:
        return copy.deepcopy(self._store.get(key))

    @override
    def save(self, key: str, value: JSONValue) -> None:
        self._store[key] = copy.deepcopy(value)

    @override
    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self._store

    def keys(self) -> list[str]:
        return list(self._store.keys())

    def clear(self) -> None:
        self._store.clear()
