from __future__ import annotations

from typing import TYPE_CHECKING, override

from ...application.ports.repositories import FileCompletionPort
from ...constants import StorageKeys

if TYPE_CHECKING:
    from ...application.ports.repositories import DocumentStorePort


class DocumentStoreFileCompletion(FileCompletionPort):
    """Per file/sheet completion flags kept as ``{file_id: {sheet: bool}}``."""

    def __init__(self, store: DocumentStorePort) -> None:
        super().__init__()
        self._store = store

    @override
    def set_file_complete(self, file_id: str, sheet_name: str, complete: bool) -> None:
        flags = self._flags()
        sheets = flags.setdefault(file_id, {})
        if sheets.get(sheet_name) == complete:
            return
        sheets[sheet_name] = complete
        self._store.save(StorageKeys.FILE_COMPLETION, flags)

    @override
    def is_marked_complete(self, file_id: str, sheet_name: str) -> bool | None:
        return self._flags().get(file_id, {}).get(sheet_name)

    def _flags(self) -> dict[str, dict[str, bool]]:
        value = self._store.load(StorageKeys.FILE_COMPLETION)
        if not isinstance(value, dict):
            return {}
        flags: dict[str, dict[str, bool]] = {}
        for file_id, sheets in value.items():
            if isinstance(sheets, dict):
                flags[file_id] = {
                    str(sheet): bool(flag) for sheet, flag in sheets.items()
                }
        return flags
