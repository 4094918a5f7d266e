"""Infrastructure I/O layer.

Spreadsheet reading and header cleanup.
"""

from .exceptions import (
    DataParseError,
    DataSourceError,
    DataSourceNotFoundError,
    MergerInfrastructureError,
)
from .spreadsheet_reader import PandasSpreadsheetReader

__all__ = [
    "DataParseError",
    "DataSourceError",
    "DataSourceNotFoundError",
    "MergerInfrastructureError",
    "PandasSpreadsheetReader",
]
