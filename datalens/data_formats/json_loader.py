"""
JSON and JSON Lines data loaders.

Both formats describe one row per JSON object. ``JSONLoader`` reads a whole
document (an array of objects, or a single object as a one-row dataset);
``JSONLLoader`` reads one object per line and skips blank lines.

Anything that is not an object where a row is expected raises
``DatasetLoadError`` naming the file and the offending array index or line
number, so the message can be shown to the user as-is.
"""

from __future__ import annotations

import json
import os
from typing import Any, Iterator

from datalens.data_formats.base import DataLoader
from datalens.errors import DatasetLoadError


def _type_name(value: Any) -> str:
    """JSON name of a decoded value's type."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def ensure_record(value: Any, where: str, filename: str) -> dict[str, Any]:
    """Return ``value`` if it is a JSON object, else raise DatasetLoadError.

    Args:
        value: A decoded JSON value that should describe one row.
        where: Location of the value for the error message, e.g. "line 3".
        filename: Source path, recorded on the error.

    Examples:
        >>> ensure_record({"id": 1}, "item 0", "rows.json")
        {'id': 1}
    """
    if isinstance(value, dict):
        return value
    raise DatasetLoadError(
        f"{where.capitalize()} of {os.path.basename(filename)} is not a JSON "
        f"object (got {_type_name(value)})",
        source=filename,
    )


class JSONLoader(DataLoader):
    """Data loader for JSON documents.

    Nested values are kept as-is here and flattened to JSON text during
    normalization.
    """

    @property
    def format_name(self) -> str:
        return "json"

    @property
    def supported_extensions(self) -> list[str]:
        return [".json"]

    def _read_document(self, filename: str) -> list[Any]:
        """Parse the document and return its candidate rows, unvalidated.

        Raises:
            json.JSONDecodeError: If the file is not valid JSON.
            DatasetLoadError: If the document is neither an array nor an object.
        """
        with open(filename, "r", encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
        raise DatasetLoadError(
            f"{os.path.basename(filename)} must contain an object or an array "
            f"of objects (got {_type_name(data)})",
            source=filename,
        )

    def load(self, filename: str) -> Iterator[dict[str, Any]]:
        for index, item in enumerate(self._read_document(filename)):
            yield ensure_record(item, f"item {index}", filename)

    def get_record_count(self, filename: str) -> int:
        return len(self._read_document(filename))


class JSONLLoader(DataLoader):
    """Data loader for JSON Lines (one object per line)."""

    @property
    def format_name(self) -> str:
        return "jsonl"

    @property
    def supported_extensions(self) -> list[str]:
        return [".jsonl", ".ndjson"]

    def load(self, filename: str) -> Iterator[dict[str, Any]]:
        """Lazily load records from a JSONL file.

        Raises:
            DatasetLoadError: If a line is not valid JSON or not an object.
        """
        with open(filename, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    value = json.loads(line)
                except json.JSONDecodeError as e:
                    raise DatasetLoadError(
                        f"Invalid JSON on line {line_number} of "
                        f"{os.path.basename(filename)}: {e.msg}",
                        source=filename,
                    ) from e
                yield ensure_record(value, f"line {line_number}", filename)

    def get_record_count(self, filename: str) -> int:
        """Count non-empty lines without parsing them."""
        with open(filename, "r", encoding="utf-8") as f:
            return sum(1 for line in f if line.strip())
