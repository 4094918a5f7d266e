from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import override

import pandas as pd

from ...application.ports.services import SpreadsheetReaderPort
from ...constants import SourceColumns
from .exceptions import DataParseError, DataSourceNotFoundError
from .header_processor import apply_header_row

EXCEL_SUFFIXES = frozenset({".xlsx", ".xlsm", ".xls"})
DELIMITED_SUFFIXES = {".csv": ",", ".tsv": "\t", ".txt": "\t"}


class PandasSpreadsheetReader(SpreadsheetReaderPort):
    """Reads CSV, TSV and Excel files addressed by file id.

    A file id is either registered against a path or is itself a path,
    relative to ``base_dir`` when one is given. Delimited files have a single
    sheet named ``Sheet1``.
    """

    def __init__(
        self,
        files: Mapping[str, Path] | None = None,
        *,
        base_dir: Path | None = None,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__()
        self._files: dict[str, Path] = dict(files or {})
        self._base_dir = base_dir
        self._encoding = encoding
        self._cache: dict[tuple[str, str], pd.DataFrame] = {}

    def register(self, file_id: str, path: Path) -> None:
        self._files[file_id] = path
        self._cache = {k: v for k, v in self._cache.items() if k[0] != file_id}

    def resolve(self, file_id: str) -> Path:
        path = self._files.get(file_id)
        if path is None:
            path = Path(file_id)
            if self._base_dir is not None and not path.is_absolute():
                path = self._base_dir / path
        if not path.exists():
            raise DataSourceNotFoundError(f"File not found: {path}")
        if not path.is_file():
            raise DataSourceNotFoundError(f"Not a file: {path}")
        return path

    @override
    def list_sheets(self, file_id: str) -> list[str]:
        path = self.resolve(file_id)
        if path.suffix.lower() not in EXCEL_SUFFIXES:
            return [SourceColumns.DEFAULT_SHEET]
        try:
            with pd.ExcelFile(path) as workbook:
                return [str(name) for name in workbook.sheet_names]
        except Exception as e:
            raise DataParseError(f"Failed to open workbook {path}: {e}") from e

    @override
    def read_columns(self, file_id: str, sheet_name: str) -> list[str]:
        return [str(c) for c in self.read_rows(file_id, sheet_name).columns]

    @override
    def read_rows(self, file_id: str, sheet_name: str) -> pd.DataFrame:
        key = (file_id, sheet_name)
        if key not in self._cache:
            self._cache[key] = self._read(self.resolve(file_id), sheet_name)
        return self._cache[key].copy()

    def _read(self, path: Path, sheet_name: str) -> pd.DataFrame:
        suffix = path.suffix.lower()
        try:
            if suffix in EXCEL_SUFFIXES:
                raw = pd.read_excel(
                    path,
                    sheet_name=sheet_name,
                    header=None,
                    dtype=str,
                    keep_default_na=False,
                    na_values=[""],
                )
            else:
                raw = pd.read_csv(
                    path,
                    sep=DELIMITED_SUFFIXES.get(suffix, ","),
                    header=None,
                    dtype=str,
                    keep_default_na=False,
                    na_values=[""],
                    encoding=self._encoding,
                )
        except FileNotFoundError as e:
            raise DataSourceNotFoundError(f"File not found: {path}") from e
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
        except pd.errors.ParserError as e:
            raise DataParseError(f"Failed to parse {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise DataParseError(
                f"Encoding error reading {path}. Try a different encoding: {e}"
            ) from e
        except ValueError as e:
            # read_excel reports unknown sheet names as ValueError
            raise DataSourceNotFoundError(
                f"Sheet '{sheet_name}' not readable in {path}: {e}"
            ) from e
        except Exception as e:
            raise DataParseError(f"Unexpected error reading {path}: {e}") from e
        return apply_header_row(raw)
