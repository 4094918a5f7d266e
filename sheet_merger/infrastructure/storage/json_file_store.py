import json
import os
from pathlib import Path
import re
import tempfile
from typing import override

from ...application.ports.repositories import DocumentStorePort, JSONValue
from ..io.exceptions import DataParseError, DataSourceError

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileDocumentStore(DocumentStorePort):
    """One ``<key>.json`` file per key inside ``directory``.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers see either the old or the new document.
    """

    def __init__(self, directory: Path) -> None:
        super().__init__()
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key) or key.startswith("."):
            raise ValueError(f"Invalid document key: {key!r}")
        return self.directory / f"{key}.json"

    @override
    def load(self, key: str) -> JSONValue:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except json.JSONDecodeError as exc:
            raise DataParseError(f"Invalid JSON in {path}: {exc}") from exc
        except OSError as exc:
            raise DataSourceError(f"Failed to read {path}: {exc}") from exc

    @override
    def save(self, key: str, value: JSONValue) -> None:
        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.directory,
                prefix=f".{key}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                json.dump(value, handle, indent=2, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as exc:
            raise DataSourceError(f"Failed to write {path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    @override
    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise DataSourceError(f"Failed to delete {path}: {exc}") from exc
