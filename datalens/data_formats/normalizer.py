"""
Record normalization for ingestion.

Every loader yields raw records with the source's own key casing and value
types. This module turns them into engine rows:

- Column names are lower-cased. The first occurrence of a name fixes its
  position; a later column that lower-cases to the same name overwrites the
  value.
- Text becomes a number only when the number prints back to exactly the same
  text ("12" -> 12, while "12.0" and "007" stay text).
- Booleans become "true"/"false"; nested lists/objects become compact JSON
  text; NaN becomes null.
"""

from __future__ import annotations

import json
import math
from typing import Any, Iterable, Mapping

from datalens.engine.dataset import Dataset
from datalens.engine.values import CellValue, infer_cell, is_number
from datalens.errors import DatasetLoadError


def normalize_column_name(name: Any) -> str:
    """Return the canonical (lower-cased) column name."""
    return str(name).lower()


def normalize_value(value: Any) -> CellValue:
    """Convert a raw value into a cell value.

    Examples:
        >>> normalize_value("42")
        42
        >>> normalize_value(True)
        'true'
        >>> normalize_value([1, 2])
        '[1,2]'
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        if isinstance(value, float) and math.isnan(value):
            return None
        return value
    if isinstance(value, str):
        return infer_cell(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return infer_cell(str(value))


def normalize_record(record: Mapping[Any, Any]) -> dict[str, CellValue]:
    """Normalize one raw record; keys of None (stray CSV fields) are dropped."""
    row: dict[str, CellValue] = {}
    for key, value in record.items():
        if key is None:
            continue
        row[normalize_column_name(key)] = normalize_value(value)
    return row


def collect_columns(records: Iterable[Mapping[Any, Any]]) -> list[str]:
    """Union of normalized column names in first-seen order."""
    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            if key is not None:
                columns.setdefault(normalize_column_name(key), None)
    return list(columns)


def dataset_from_records(
    records: list[Mapping[Any, Any]],
    *,
    source_name: str = "",
    byte_size: int = 0,
    columns: Iterable[str] | None = None,
) -> Dataset:
    """Build a Dataset from raw records.

    Args:
        records: Raw records as yielded by a loader.
        source_name: Name of the source file.
        byte_size: Size of the source in bytes.
        columns: Header names, when the format has a header. Defaults to the
            union of record keys.

    Returns:
        A new Dataset.

    Raises:
        DatasetLoadError: If there are no records.
    """
    if not records:
        raise DatasetLoadError(
            f"No data rows found in {source_name or 'the provided data'}",
            source=source_name,
        )

    if columns is None:
        column_names = collect_columns(records)
    else:
        column_names = list(dict.fromkeys(normalize_column_name(c) for c in columns))

    return Dataset.create(
        (normalize_record(record) for record in records),
        column_names,
        source_name=source_name,
        byte_size=byte_size,
    )
