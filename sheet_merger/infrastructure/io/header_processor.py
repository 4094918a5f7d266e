"""Spreadsheet header cleanup.

Headers are trimmed, empty ones are dropped and repeated ones get a numeric
suffix: ``Name``, ``Name_2``, ``Name_3``.
"""

from collections.abc import Iterable, Sequence

import pandas as pd

_PANDAS_UNNAMED_PREFIX = "Unnamed:"


def clean_header(value: object) -> str:
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    text = str(value).strip()
    if text.startswith(_PANDAS_UNNAMED_PREFIX):
        return ""
    return text


def make_unique(headers: Iterable[str]) -> list[str]:
    counts: dict[str, int] = {}
    taken: set[str] = set()
    unique: list[str] = []
    for header in headers:
        counts[header] = counts.get(header, 0) + 1
        candidate = header if counts[header] == 1 else f"{header}_{counts[header]}"
        while candidate in taken:
            counts[header] += 1
            candidate = f"{header}_{counts[header]}"
        taken.add(candidate)
        unique.append(candidate)
    return unique


def process_headers(headers: Sequence[object] | None) -> list[str]:
    if not headers:
        return []
    cleaned = [clean_header(h) for h in headers]
    return make_unique(h for h in cleaned if h)


def apply_header_row(raw: pd.DataFrame) -> pd.DataFrame:
    """Promote the first row of a header-less frame to cleaned column names.

    Columns whose header is blank are dropped along with their data.
    """
    if raw.empty:
        return pd.DataFrame()
    header_row = raw.iloc[0].tolist()
    keep = [i for i, value in enumerate(header_row) if clean_header(value)]
    names = process_headers([header_row[i] for i in keep])
    data = raw.iloc[1:, keep].reset_index(drop=True)
    data.columns = names
    return data
