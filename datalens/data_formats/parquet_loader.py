"""
Parquet data loader.

Rows are reassembled from record batches with ``RecordBatch.to_pylist``, so
lists and structs arrive as plain Python lists and dicts. The row count and
column order come from the file footer.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Iterator

import pyarrow.parquet as pq

from datalens.data_formats.base import DataLoader
from datalens.data_formats.normalizer import dataset_from_records
from datalens.engine.dataset import Dataset

# Rows per record batch
BATCH_SIZE = 10_000


class ParquetLoader(DataLoader):
    """Data loader for Apache Parquet files."""

    @property
    def format_name(self) -> str:
        return "parquet"

    @property
    def supported_extensions(self) -> list[str]:
        return [".parquet", ".pq"]

    def load(self, filename: str) -> Iterator[dict[str, Any]]:
        parquet_file = pq.ParquetFile(filename)
        for batch in parquet_file.iter_batches(batch_size=BATCH_SIZE):
            yield from batch.to_pylist()

    def get_record_count(self, filename: str) -> int:
        return pq.ParquetFile(filename).metadata.num_rows

    def get_columns(self, filename: str) -> list[str]:
        """Column names in schema order."""
        return pq.ParquetFile(filename).schema_arrow.names

    def load_all(
        self,
        filename: str,
        max_records: int | None = None,
        progress_callback: Callable[[int, int | None], None] | None = None,
    ) -> list[dict[str, Any]]:
        """Load rows batch by batch, reporting progress against the footer count."""
        parquet_file = pq.ParquetFile(filename)
        total = parquet_file.metadata.num_rows
        if max_records is not None:
            total = min(total, max_records)

        records: list[dict[str, Any]] = []
        for batch in parquet_file.iter_batches(batch_size=BATCH_SIZE):
            records.extend(batch.to_pylist())
            if max_records is not None and len(records) >= max_records:
                del records[max_records:]
                break
            if progress_callback is not None:
                progress_callback(len(records), total)

        if progress_callback is not None:
            progress_callback(len(records), len(records))
        return records

    def load_dataset(
        self,
        filename: str,
        progress_callback: Callable[[int, int | None], None] | None = None,
    ) -> Dataset:
        """Load a file as a Dataset whose columns follow the schema."""
        records = self.load_all(filename, progress_callback=progress_callback)
        return dataset_from_records(
            records,
            source_name=Path(filename).name,
            byte_size=os.path.getsize(filename),
            columns=self.get_columns(filename),
        )
