"""
Dataset snapshot model.

A Dataset is never mutated. Every edit, insertion or deletion returns a new
Dataset, so consumers can use ``is`` on the Dataset reference as a cheap
"something changed" signal and readers always see a consistent snapshot.

Each row carries an original index. Indices start as 0-based ingestion
positions, survive filtering and sorting, and are never reassigned: deleting
a row leaves every other row's index untouched, and appended rows receive the
next index that has never been issued.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Iterable, Iterator, Mapping, Sequence

from datalens.engine.values import CellValue, Row
from datalens.errors import DatasetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetMetadata:
    """Provenance of a Dataset.

    Attributes:
        row_count: Number of rows in the snapshot.
        byte_size: Size of the source in bytes (0 for derived datasets).
        source_name: File name or label the rows came from.
    """

    row_count: int
    byte_size: int = 0
    source_name: str = ""


@dataclass(frozen=True)
class IndexedRow:
    """A row paired with its original index."""

    original_index: int
    row: Row

    def get(self, column: str) -> CellValue:
        """Return the cell for ``column``, or None when absent."""
        return self.row.get(column)


@dataclass(frozen=True, eq=False)
class Dataset:
    """Immutable snapshot of rows, column order and provenance.

    Use ``Dataset.create`` to build one from plain rows; the constructor is
    for copy-on-write derivations that already know every field.

    Attributes:
        rows: Rows in storage order.
        columns: Unique column names; display order and key universe.
        metadata: Provenance, with ``row_count == len(rows)``.
        original_indices: Original index of each row, parallel to ``rows``.
        next_index: Index the next appended row will receive.
    """

    rows: tuple[Row, ...]
    columns: tuple[str, ...]
    metadata: DatasetMetadata
    original_indices: tuple[int, ...] = field(default=())
    next_index: int = 0

    def __post_init__(self) -> None:
        if len(set(self.columns)) != len(self.columns):
            duplicates = sorted({c for c in self.columns if self.columns.count(c) > 1})
            raise DatasetError(f"Duplicate column names: {', '.join(duplicates)}")
        if self.metadata.row_count != len(self.rows):
            raise DatasetError(
                f"metadata.row_count is {self.metadata.row_count} "
                f"but the dataset holds {len(self.rows)} rows"
            )
        if len(self.original_indices) != len(self.rows):
            raise DatasetError(
                f"{len(self.original_indices)} original indices "
                f"for {len(self.rows)} rows"
            )
        if len(set(self.original_indices)) != len(self.original_indices):
            raise DatasetError("Original indices must be unique")
        if self.original_indices and self.next_index <= max(self.original_indices):
            raise DatasetError(
                f"next_index {self.next_index} collides with an existing index"
            )

    @classmethod
    def create(
        cls,
        rows: Iterable[Mapping[str, CellValue]],
        columns: Sequence[str],
        *,
        source_name: str = "",
        byte_size: int = 0,
    ) -> "Dataset":
        """Build a fresh Dataset, numbering rows 0..n-1.

        Args:
            rows: Row mappings; each is copied into a plain dict.
            columns: Column names in display order.
            source_name: Name of the source file or label.
            byte_size: Size of the source in bytes.

        Returns:
            A new Dataset.

        Raises:
            DatasetError: If ``columns`` contains duplicates.
        """
        materialized = tuple(dict(row) for row in rows)
        return cls(
            rows=materialized,
            columns=tuple(columns),
            metadata=DatasetMetadata(
                row_count=len(materialized),
                byte_size=byte_size,
                source_name=source_name,
            ),
            original_indices=tuple(range(len(materialized))),
            next_index=len(materialized),
        )

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __repr__(self) -> str:
        return (
            f"Dataset(source={self.metadata.source_name!r}, "
            f"rows={len(self.rows)}, columns={len(self.columns)})"
        )

    @property
    def source_name(self) -> str:
        return self.metadata.source_name

    @cached_property
    def indexed_rows(self) -> tuple[IndexedRow, ...]:
        """Rows paired with their original indices, built once per snapshot."""
        return tuple(
            IndexedRow(original_index=idx, row=row)
            for idx, row in zip(self.original_indices, self.rows)
        )

    @cached_property
    def _positions(self) -> dict[int, int]:
        return {idx: pos for pos, idx in enumerate(self.original_indices)}

    def position_of(self, original_index: int) -> int | None:
        """Return the storage position of an original index, or None."""
        return self._positions.get(original_index)

    def has_index(self, original_index: int) -> bool:
        return original_index in self._positions

    def row_at(self, original_index: int) -> Row | None:
        """Return the row with the given original index, or None."""
        pos = self._positions.get(original_index)
        if pos is None:
            return None
        return self.rows[pos]

    def with_cell(
        self, original_index: int, column: str, value: CellValue
    ) -> "Dataset":
        """Return a copy with one cell replaced.

        Unknown indices or columns leave the dataset unchanged and return
        ``self``.
        """
        pos = self._positions.get(original_index)
        if pos is None:
            logger.debug("with_cell: no row with original index %d", original_index)
            return self
        if column not in self.columns:
            logger.warning("with_cell: unknown column %r", column)
            return self

        new_row = dict(self.rows[pos])
        new_row[column] = value
        rows = self.rows[:pos] + (new_row,) + self.rows[pos + 1 :]
        return replace(self, rows=rows)

    def with_row_added(self, row: Mapping[str, CellValue] | None = None) -> "Dataset":
        """Return a copy with a row appended.

        When ``row`` is None, the new row has every column set to empty text.
        """
        if row is None:
            new_row: dict[str, CellValue] = {col: "" for col in self.columns}
        else:
            new_row = {col: row[col] for col in self.columns if col in row}

        rows = self.rows + (new_row,)
        return replace(
            self,
            rows=rows,
            metadata=replace(self.metadata, row_count=len(rows)),
            original_indices=self.original_indices + (self.next_index,),
            next_index=self.next_index + 1,
        )

    def without_row(self, original_index: int) -> "Dataset":
        """Return a copy without the row holding ``original_index``.

        Out-of-range indices are a no-op and return ``self``.
        """
        pos = self._positions.get(original_index)
        if pos is None:
            logger.debug("without_row: no row with original index %d", original_index)
            return self

        rows = self.rows[:pos] + self.rows[pos + 1 :]
        return replace(
            self,
            rows=rows,
            metadata=replace(self.metadata, row_count=len(rows)),
            original_indices=(
                self.original_indices[:pos] + self.original_indices[pos + 1 :]
            ),
        )
