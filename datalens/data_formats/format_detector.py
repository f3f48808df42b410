"""
Format detection utilities for data files.

This module provides functions to detect file formats and get appropriate loaders.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from datalens.errors import UnsupportedFormatError

if TYPE_CHECKING:
    from datalens.data_formats.base import DataLoader


# Mapping of file extensions to format names
EXTENSION_MAP: dict[str, str] = {
    ".csv": "csv",
    ".txt": "csv",
    ".tsv": "tsv",
    ".tab": "tsv",
    ".jsonl": "jsonl",
    ".ndjson": "jsonl",
    ".json": "json",
    ".parquet": "parquet",
    ".pq": "parquet",
}

# Supported format names
SUPPORTED_FORMATS = frozenset(["csv", "tsv", "jsonl", "json", "parquet"])


def detect_format(filename: str) -> str:
    """Detect file format from extension or content.

    Files with an unknown extension are sniffed: Parquet magic bytes, then a
    leading ``[`` (JSON) or ``{`` (JSONL); any other readable text is treated
    as CSV.

    Args:
        filename: Path to the file.

    Returns:
        Format name: "csv", "tsv", "jsonl", "json", or "parquet".

    Raises:
        UnsupportedFormatError: If the format cannot be determined.

    Examples:
        >>> detect_format("data.csv")
        'csv'
        >>> detect_format("data.parquet")
        'parquet'
    """
    extension = Path(filename).suffix.lower()

    if extension in EXTENSION_MAP:
        return EXTENSION_MAP[extension]

    path = Path(filename)
    if path.is_file():
        try:
            with open(filename, "rb") as f:
                if f.read(4) == b"PAR1":
                    return "parquet"
        except OSError:
            pass

        try:
            with open(filename, "r", encoding="utf-8") as f:
                head = f.read(1024)
        except (OSError, UnicodeDecodeError):
            head = None

        if head is not None:
            first_char = next((c for c in head if not c.isspace()), None)
            if first_char == "[":
                return "json"
            if first_char == "{":
                return "jsonl"
            if first_char is not None:
                return "tsv" if "\t" in head.splitlines()[0] else "csv"

    raise UnsupportedFormatError(
        f"Cannot determine format for '{filename}'. "
        f"Supported extensions: {', '.join(sorted(EXTENSION_MAP.keys()))}",
        source=filename,
    )


def get_loader_for_format(format_name: str) -> "DataLoader":
    """Get a loader for a specific format name.

    Args:
        format_name: One of SUPPORTED_FORMATS.

    Returns:
        A DataLoader instance for the specified format.

    Raises:
        UnsupportedFormatError: If the format name is not supported.

    Examples:
        >>> get_loader_for_format("parquet").format_name
        'parquet'
    """
    # Import loaders here to avoid circular imports
    from datalens.data_formats.csv_loader import CSVLoader, TSVLoader
    from datalens.data_formats.json_loader import JSONLLoader, JSONLoader
    from datalens.data_formats.parquet_loader import ParquetLoader

    if format_name not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported format '{format_name}'. "
            f"Supported formats: {', '.join(sorted(SUPPORTED_FORMATS))}"
        )

    loaders: dict[str, DataLoader] = {
        "csv": CSVLoader(),
        "tsv": TSVLoader(),
        "jsonl": JSONLLoader(),
        "json": JSONLoader(),
        "parquet": ParquetLoader(),
    }

    return loaders[format_name]


def get_loader(filename: str) -> "DataLoader":
    """Factory function to get the appropriate loader for a file.

    Raises:
        UnsupportedFormatError: If the format cannot be determined.
    """
    return get_loader_for_format(detect_format(filename))
