"""
View engine: the grid model behind a dataset table.

Derivation pipeline (each stage cached until one of its inputs is replaced):

    Dataset.indexed_rows -> filter(search term) -> sort(SortSpec) -> page

Row coordinates used by selection are positions in the *visible* sequence
(filtered and sorted, ignoring pagination). Edits and row deletion address
rows by original index, which is the only identity that survives filtering
and sorting.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Iterable, Iterator, Sequence

from datalens.engine.dataset import Dataset, IndexedRow
from datalens.engine.stats import SelectionStats, summarize
from datalens.engine.values import CellValue, is_number, parse_edit_text, stringify
from datalens.errors import EditInProgressError, NotEditableError

logger = logging.getLogger(__name__)

# Column sentinel meaning "every column of the row"
WHOLE_ROW = -1


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class SortSpec:
    """Sort key and direction."""

    key: str
    direction: SortDirection = SortDirection.ASCENDING

    @property
    def ascending(self) -> bool:
        return self.direction is SortDirection.ASCENDING

    def toggled(self, key: str) -> "SortSpec":
        """Return the spec that results from clicking ``key``.

        Clicking the current key flips the direction; any other key starts
        ascending.
        """
        if key == self.key:
            direction = (
                SortDirection.DESCENDING if self.ascending else SortDirection.ASCENDING
            )
            return SortSpec(key, direction)
        return SortSpec(key)


@dataclass(frozen=True)
class GridPoint:
    """A cell position in the visible sequence."""

    row_index: int
    col_index: int


@dataclass(frozen=True)
class SelectionRange:
    """Two corners of a rectangular selection, in any order."""

    start: GridPoint
    end: GridPoint

    def bounds(self, column_count: int) -> tuple[int, int, int, int]:
        """Return ``(row_min, row_max, col_min, col_max)``, inclusive.

        A ``WHOLE_ROW`` column on either corner expands to all columns.
        """
        row_min = min(self.start.row_index, self.end.row_index)
        row_max = max(self.start.row_index, self.end.row_index)
        if WHOLE_ROW in (self.start.col_index, self.end.col_index):
            return row_min, row_max, 0, column_count - 1
        col_min = min(self.start.col_index, self.end.col_index)
        col_max = max(self.start.col_index, self.end.col_index)
        return row_min, row_max, col_min, col_max

    def contains(self, row_index: int, col_index: int, column_count: int) -> bool:
        row_min, row_max, col_min, col_max = self.bounds(column_count)
        return row_min <= row_index <= row_max and col_min <= col_index <= col_max


@dataclass(frozen=True)
class EditState:
    """The cell currently in edit mode and its staged text."""

    original_index: int
    column: str
    staged_text: str = ""


def filter_rows(
    rows: Sequence[IndexedRow], columns: Sequence[str], term: str
) -> tuple[IndexedRow, ...]:
    """Keep rows where any column's text contains ``term`` (case-insensitive).

    An empty term keeps every row in its original order.
    """
    if not term:
        return tuple(rows)
    needle = term.lower()
    return tuple(
        row
        for row in rows
        if any(needle in stringify(row.get(col)).lower() for col in columns)
    )


def compare_values(a: CellValue, b: CellValue, ascending: bool = True) -> int:
    """Three-way comparison used by the grid sort.

    Nulls are placed after non-nulls regardless of direction. Two numbers
    compare numerically; anything else compares by lower-cased text. The
    direction flips only the non-null comparisons.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1

    if is_number(a) and is_number(b):
        result = (a > b) - (a < b)
    else:
        text_a = stringify(a).lower()
        text_b = stringify(b).lower()
        result = (text_a > text_b) - (text_a < text_b)
    return result if ascending else -result


def sort_rows(
    rows: Sequence[IndexedRow], spec: SortSpec | None
) -> tuple[IndexedRow, ...]:
    """Stable sort of indexed rows by ``spec``; None keeps the input order."""
    if spec is None:
        return tuple(rows)

    def _cmp(left: IndexedRow, right: IndexedRow) -> int:
        return compare_values(left.get(spec.key), right.get(spec.key), spec.ascending)

    return tuple(sorted(rows, key=cmp_to_key(_cmp)))


def page_count(total: int, page_size: int | None) -> int:
    """Number of pages for ``total`` rows; always at least 1."""
    if not page_size:
        return 1
    return max(1, math.ceil(total / page_size))


class ViewEngine:
    """Searchable, sortable, selectable, editable projection of a Dataset.

    The engine holds a reference to the current Dataset snapshot and never
    mutates it. Commit, add and delete replace the reference with a new
    snapshot; read ``dataset`` afterwards to pick up the change.

    Args:
        dataset: The snapshot to project.
        page_size: Rows per page, or None to show the full visible sequence.
        editable: Whether cell edits and row add/delete are allowed.
    """

    def __init__(
        self,
        dataset: Dataset,
        *,
        page_size: int | None = None,
        editable: bool = False,
    ) -> None:
        self._dataset = dataset
        self._page_size = page_size
        self._editable = editable
        self._search_term = ""
        self._sort: SortSpec | None = None
        self._page = 1

        self._selection: SelectionRange | None = None
        self._dragging = False
        self._edit: EditState | None = None

        self._filtered: tuple[IndexedRow, ...] | None = None
        self._visible: tuple[IndexedRow, ...] | None = None

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def columns(self) -> tuple[str, ...]:
        return self._dataset.columns

    @property
    def editable(self) -> bool:
        return self._editable

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def sort(self) -> SortSpec | None:
        return self._sort

    @property
    def page_size(self) -> int | None:
        return self._page_size

    def set_dataset(self, dataset: Dataset) -> None:
        """Swap in a snapshot produced outside this engine.

        Selection and edit state refer to the old snapshot and are cleared.
        """
        if dataset is self._dataset:
            return
        self._dataset = dataset
        self._invalidate(filtered=True)
        self.clear_selection()
        self._edit = None
        self._clamp_page()

    def set_search_term(self, term: str) -> None:
        """Filter by ``term``; resets to the first page and clears selection."""
        if term == self._search_term:
            return
        self._search_term = term
        self._page = 1
        self._invalidate(filtered=True)
        self.clear_selection()

    def sort_by(self, key: str) -> SortSpec:
        """Sort by ``key``, toggling direction when it is already the key."""
        if self._sort is None:
            spec = SortSpec(key)
        else:
            spec = self._sort.toggled(key)
        self.set_sort(spec)
        return spec

    def set_sort(self, spec: SortSpec | None) -> None:
        if spec == self._sort:
            return
        self._sort = spec
        self._invalidate(filtered=False)
        self.clear_selection()

    # ------------------------------------------------------------------
    # Derived sequences
    # ------------------------------------------------------------------

    def _invalidate(self, *, filtered: bool) -> None:
        if filtered:
            self._filtered = None
        self._visible = None

    @property
    def filtered_rows(self) -> tuple[IndexedRow, ...]:
        if self._filtered is None:
            self._filtered = filter_rows(
                self._dataset.indexed_rows, self._dataset.columns, self._search_term
            )
        return self._filtered

    @property
    def visible_rows(self) -> tuple[IndexedRow, ...]:
        """Filtered then sorted rows, ignoring pagination."""
        if self._visible is None:
            self._visible = sort_rows(self.filtered_rows, self._sort)
        return self._visible

    @property
    def visible_count(self) -> int:
        return len(self.visible_rows)

    def position_of(self, original_index: int) -> int | None:
        """Visible position of a row, or None when it is filtered out or gone."""
        for position, indexed in enumerate(self.visible_rows):
            if indexed.original_index == original_index:
                return position
        return None

    def row_at(self, row_index: int) -> IndexedRow | None:
        """Return the visible row at ``row_index``, or None if out of range."""
        if 0 <= row_index < self.visible_count:
            return self.visible_rows[row_index]
        return None

    def cell_value(self, row_index: int, column: str) -> CellValue:
        row = self.row_at(row_index)
        return None if row is None else row.get(column)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_count(self) -> int:
        return page_count(self.visible_count, self._page_size)

    @property
    def page_offset(self) -> int:
        """Visible position of the first row on the current page."""
        if not self._page_size:
            return 0
        return (self._page - 1) * self._page_size

    @property
    def page_rows(self) -> tuple[IndexedRow, ...]:
        if not self._page_size:
            return self.visible_rows
        start = self.page_offset
        return self.visible_rows[start : start + self._page_size]

    def set_page(self, page: int) -> int:
        """Go to ``page``, clamped into ``[1, page_count]``."""
        self._page = min(max(1, page), self.page_count)
        return self._page

    def next_page(self) -> int:
        return self.set_page(self._page + 1)

    def previous_page(self) -> int:
        return self.set_page(self._page - 1)

    def _clamp_page(self) -> None:
        self._page = min(max(1, self._page), self.page_count)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selection(self) -> SelectionRange | None:
        return self._selection

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    def press(self, row_index: int, col_index: int, *, extend: bool = False) -> None:
        """Start a selection at a cell, or extend the current one.

        With ``extend`` set and an existing selection, the anchor is kept and
        only the end point moves. A drag is active until ``release``.
        """
        point = GridPoint(row_index, col_index)
        if extend and self._selection is not None:
            self._selection = SelectionRange(self._selection.start, point)
        else:
            self._selection = SelectionRange(point, point)
        self._dragging = True

    def enter(self, row_index: int, col_index: int) -> None:
        """Move the end point while a drag is active; ignored otherwise."""
        if not self._dragging or self._selection is None:
            return
        self._selection = SelectionRange(
            self._selection.start, GridPoint(row_index, col_index)
        )

    def release(self) -> None:
        self._dragging = False

    def select_row(self, row_index: int) -> None:
        point = GridPoint(row_index, WHOLE_ROW)
        self._selection = SelectionRange(point, point)
        self._dragging = False

    def select_column(self, col_index: int) -> None:
        """Select a column across the whole visible sequence."""
        last = max(self.visible_count - 1, 0)
        self._selection = SelectionRange(
            GridPoint(0, col_index), GridPoint(last, col_index)
        )
        self._dragging = False

    def clear_selection(self) -> None:
        self._selection = None
        self._dragging = False

    def is_selected(self, row_index: int, col_index: int) -> bool:
        """Per-cell selection predicate for renderers."""
        if self._selection is None:
            return False
        return self._selection.contains(row_index, col_index, len(self.columns))

    def selected_values(self) -> Iterator[CellValue]:
        """Yield the cells inside the selection, clipped to the visible grid."""
        if self._selection is None or not self.columns or not self.visible_count:
            return
        row_min, row_max, col_min, col_max = self._selection.bounds(len(self.columns))
        row_min, col_min = max(row_min, 0), max(col_min, 0)
        row_max = min(row_max, self.visible_count - 1)
        col_max = min(col_max, len(self.columns) - 1)

        visible = self.visible_rows
        for row_index in range(row_min, row_max + 1):
            row = visible[row_index]
            for col_index in range(col_min, col_max + 1):
                yield row.get(self.columns[col_index])

    def selection_stats(self) -> SelectionStats | None:
        """Aggregate statistics of the selection, or None if nothing is selected."""
        if self._selection is None:
            return None
        return summarize(self.selected_values())

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    @property
    def edit_state(self) -> EditState | None:
        return self._edit

    @property
    def is_editing(self) -> bool:
        return self._edit is not None

    def is_editing_cell(self, original_index: int, column: str) -> bool:
        return (
            self._edit is not None
            and self._edit.original_index == original_index
            and self._edit.column == column
        )

    def begin_edit(self, row_index: int, column: str) -> EditState | None:
        """Stage the cell at a visible position for editing.

        The current value is staged as text (null stages as empty text) and
        the selection is cleared.

        Returns:
            The new EditState, or None when the position or column does not
            exist.

        Raises:
            NotEditableError: If the engine is read-only.
            EditInProgressError: If another edit is still open.
        """
        row = self.row_at(row_index)
        if row is None or column not in self.columns:
            return None
        return self.begin_edit_at(row.original_index, column)

    def begin_edit_at(self, original_index: int, column: str) -> EditState | None:
        """Stage the cell addressed by original index for editing."""
        if not self._editable:
            raise NotEditableError("This view is read-only")
        if self._edit is not None:
            raise EditInProgressError(
                f"Cell ({self._edit.original_index}, {self._edit.column!r}) "
                "is still being edited"
            )
        row = self._dataset.row_at(original_index)
        if row is None or column not in self.columns:
            return None

        self.clear_selection()
        self._edit = EditState(original_index, column, stringify(row.get(column)))
        logger.debug("Editing cell (%d, %r)", original_index, column)
        return self._edit

    def update_edit_text(self, text: str) -> None:
        if self._edit is None:
            return
        self._edit = EditState(self._edit.original_index, self._edit.column, text)

    def commit_edit(self) -> Dataset | None:
        """Write the staged text into a new Dataset snapshot.

        Returns:
            The new Dataset, or None when no edit was open.
        """
        if self._edit is None:
            return None
        edit = self._edit
        self._edit = None
        value = parse_edit_text(edit.staged_text)
        logger.debug(
            "Committing %r to cell (%d, %r)", value, edit.original_index, edit.column
        )
        self._replace_dataset(
            self._dataset.with_cell(edit.original_index, edit.column, value)
        )
        return self._dataset

    def cancel_edit(self) -> None:
        self._edit = None

    # ------------------------------------------------------------------
    # Row lifecycle
    # ------------------------------------------------------------------

    def add_row(self) -> Dataset:
        """Append an empty row and return the new snapshot."""
        if not self._editable:
            raise NotEditableError("This view is read-only")
        self._replace_dataset(self._dataset.with_row_added())
        return self._dataset

    def delete_row(self, original_index: int) -> Dataset:
        """Remove the row with ``original_index``; unknown indices are a no-op."""
        if not self._editable:
            raise NotEditableError("This view is read-only")
        self._replace_dataset(self._dataset.without_row(original_index))
        return self._dataset

    def _replace_dataset(self, dataset: Dataset) -> None:
        """Adopt a snapshot derived from the current one.

        Coordinates that still fall inside the new bounds are kept; anything
        pointing past them is dropped.
        """
        if dataset is self._dataset:
            return
        self._dataset = dataset
        self._invalidate(filtered=True)
        self._clamp_page()

        if self._edit is not None and not dataset.has_index(self._edit.original_index):
            self._edit = None
        if self._selection is not None:
            row_min, row_max, _, _ = self._selection.bounds(len(self.columns))
            if row_max >= self.visible_count or row_min < 0:
                self.clear_selection()


def export_view(
    rows: Iterable[IndexedRow],
) -> list[dict[str, CellValue]]:
    """Strip original indices from indexed rows, e.g. for export."""
    return [dict(row.row) for row in rows]
