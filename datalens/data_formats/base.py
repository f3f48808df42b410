"""
Abstract base class for data loaders.

This module defines the DataLoader interface that all format-specific
loaders implement. A loader only has to yield raw records; turning them
into a Dataset (column casing, number inference) is shared.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Iterator

from datalens.data_formats.normalizer import dataset_from_records
from datalens.engine.dataset import Dataset


class DataLoader(ABC):
    """Abstract base class for loading tabular datasets.

    All format-specific loaders (CSV, JSONL, JSON, Parquet) inherit from
    this class and implement the abstract members.
    """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the format name (e.g., 'csv', 'jsonl', 'parquet')."""
        pass

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions (e.g., ['.csv'])."""
        pass

    @abstractmethod
    def load(self, filename: str) -> Iterator[dict[str, Any]]:
        """Lazily load raw records from file.

        Args:
            filename: Path to the file.

        Yields:
            Each record as a dictionary with the source's own key casing.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file content is invalid for the format.
        """
        pass

    def load_all(
        self,
        filename: str,
        max_records: int | None = None,
        progress_callback: Callable[[int, int | None], None] | None = None,
    ) -> list[dict[str, Any]]:
        """Load all raw records from file into memory.

        Args:
            filename: Path to the file.
            max_records: Maximum number of records to load (None = all).
            progress_callback: Optional callback(loaded_count, total_count) for
                              progress updates. total_count may be None if unknown.

        Returns:
            A list of all records as dictionaries.
        """
        records: list[dict[str, Any]] = []

        for i, record in enumerate(self.load(filename)):
            if max_records is not None and i >= max_records:
                break
            records.append(record)
            if progress_callback is not None and i % 1000 == 0:
                progress_callback(i + 1, None)

        if progress_callback is not None:
            progress_callback(len(records), len(records))

        return records

    def get_record_count(self, filename: str) -> int:
        """Get total number of records.

        The default implementation streams through the file; formats with
        cheaper metadata override it.
        """
        return sum(1 for _ in self.load(filename))

    def load_dataset(
        self,
        filename: str,
        progress_callback: Callable[[int, int | None], None] | None = None,
    ) -> Dataset:
        """Load a file as a Dataset.

        Args:
            filename: Path to the file.
            progress_callback: Forwarded to ``load_all``.

        Returns:
            A Dataset named after the file.

        Raises:
            DatasetLoadError: If the file holds no rows.
        """
        records = self.load_all(filename, progress_callback=progress_callback)
        return dataset_from_records(
            records,
            source_name=Path(filename).name,
            byte_size=os.path.getsize(filename),
        )
