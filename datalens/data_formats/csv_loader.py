"""
Delimited text data loader.

This module provides the CSVLoader class for comma-separated files and the
TSVLoader variant for tab-separated files. The first line is the header;
short rows are padded with empty text and surplus fields are dropped, so
every record carries exactly the header's keys in header order.
"""

from __future__ import annotations

import csv
import io
from typing import Any, Iterator, TextIO

from datalens.data_formats.base import DataLoader
from datalens.data_formats.normalizer import dataset_from_records
from datalens.engine.dataset import Dataset
from datalens.errors import DatasetLoadError


def _read_rows(handle: TextIO, delimiter: str) -> Iterator[dict[str, Any]]:
    reader = csv.DictReader(handle, delimiter=delimiter, restval="")
    for record in reader:
        yield {key: value for key, value in record.items() if key is not None}


def parse_csv_text(
    text: str,
    source_name: str = "pasted_data.csv",
    byte_size: int | None = None,
    *,
    delimiter: str = ",",
) -> Dataset:
    """Parse delimited text (e.g. pasted from a clipboard) into a Dataset.

    Args:
        text: The delimited text, header line first.
        source_name: Name recorded in the dataset metadata.
        byte_size: Size recorded in the metadata; defaults to the UTF-8 size
            of ``text``.
        delimiter: Field separator.

    Returns:
        A new Dataset.

    Raises:
        DatasetLoadError: If the text is blank, malformed or has no data rows.

    Examples:
        >>> ds = parse_csv_text("ID,Name\\n1,Ann\\n")
        >>> ds.columns
        ('id', 'name')
        >>> ds.rows[0]
        {'id': 1, 'name': 'Ann'}
    """
    if not text.strip():
        raise DatasetLoadError("Please provide some CSV content.", source=source_name)

    if byte_size is None:
        byte_size = len(text.encode("utf-8"))

    try:
        records = list(_read_rows(io.StringIO(text, newline=""), delimiter))
    except csv.Error as e:
        raise DatasetLoadError(f"Failed to parse CSV: {e}", source=source_name) from e

    return dataset_from_records(records, source_name=source_name, byte_size=byte_size)


class CSVLoader(DataLoader):
    """Data loader for comma-separated values.

    Attributes:
        format_name: Returns 'csv'.
        supported_extensions: Returns ['.csv', '.txt'].
    """

    delimiter = ","

    @property
    def format_name(self) -> str:
        """Return the format name."""
        return "csv"

    @property
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions."""
        return [".csv", ".txt"]

    def load(self, filename: str) -> Iterator[dict[str, Any]]:
        """Lazily load records from a delimited file.

        Args:
            filename: Path to the file.

        Yields:
            Each data row as a dictionary keyed by the header.

        Raises:
            FileNotFoundError: If the file does not exist.
            csv.Error: If the file is malformed.

        Examples:
            >>> loader = CSVLoader()
            >>> for record in loader.load("sales.csv"):
            ...     print(record["Region"])
        """
        # utf-8-sig drops the BOM that spreadsheet tools prepend
        with open(filename, "r", encoding="utf-8-sig", newline="") as f:
            yield from _read_rows(f, self.delimiter)


class TSVLoader(CSVLoader):
    """Data loader for tab-separated values."""

    delimiter = "\t"

    @property
    def format_name(self) -> str:
        return "tsv"

    @property
    def supported_extensions(self) -> list[str]:
        return [".tsv", ".tab"]
