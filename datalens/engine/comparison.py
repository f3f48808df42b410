"""
Comparison engine: join two datasets on a shared key column.

The join is a hash left-equi-join on the *stringified* key, so a numeric 7
and the text "7" match. Dataset 2 is indexed first; when several of its rows
share a key value the last one wins and is the only match target. Rows of
dataset 1 without a partner go to ``unique1``; rows of dataset 2 whose key
was never matched go to ``unique2``.

Matched rows are merged into a single row: the key stays unqualified and
every other column is prefixed with the side it came from::

    {"id": 1, "(File 1) x": "a", "(File 2) x": "b"}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from datalens.engine.dataset import Dataset
from datalens.engine.values import CellValue, Row, is_number, stringify
from datalens.errors import IncomparableDatasetsError, InvalidJoinKeyError

logger = logging.getLogger(__name__)

FILE1_PREFIX = "(File 1) "
FILE2_PREFIX = "(File 2) "


class ComparisonView(str, Enum):
    """Which bucket of a comparison is on display."""

    MATCHES = "matches"
    UNIQUE1 = "unique1"
    UNIQUE2 = "unique2"


def qualify(column: str, side: int) -> str:
    """Return the side-qualified name of a non-key column.

    Examples:
        >>> qualify("price", 1)
        '(File 1) price'
    """
    if side == 1:
        return f"{FILE1_PREFIX}{column}"
    if side == 2:
        return f"{FILE2_PREFIX}{column}"
    raise ValueError(f"side must be 1 or 2 (got {side})")


def common_columns(columns1: Sequence[str], columns2: Sequence[str]) -> list[str]:
    """Columns present in both lists, in the order of ``columns1``."""
    shared = set(columns2)
    return [col for col in columns1 if col in shared]


def merged_columns(
    columns1: Sequence[str], columns2: Sequence[str], key: str
) -> list[str]:
    """Column order for merged rows.

    The key comes first. Each dataset 1 column is followed directly by its
    dataset 2 counterpart when one exists, and dataset 2's remaining columns
    are appended at the end.

    Examples:
        >>> merged_columns(["id", "a", "b"], ["id", "b", "c"], "id")
        ['id', '(File 1) a', '(File 1) b', '(File 2) b', '(File 2) c']
    """
    in_second = set(columns2)
    cols = [key]
    emitted = {key}

    for col in columns1:
        if col == key:
            continue
        cols.append(qualify(col, 1))
        if col in in_second:
            cols.append(qualify(col, 2))
        emitted.add(col)

    for col in columns2:
        if col not in emitted:
            cols.append(qualify(col, 2))

    return cols


def merge_rows(row1: Row, row2: Row, key: str) -> dict[str, CellValue]:
    """Merge two matched rows into one side-qualified row."""
    merged: dict[str, CellValue] = {key: row1.get(key)}
    for col, value in row1.items():
        if col != key:
            merged[qualify(col, 1)] = value
    for col, value in row2.items():
        if col != key:
            merged[qualify(col, 2)] = value
    return merged


@dataclass(frozen=True)
class ComparisonResult:
    """Three-way classification of two datasets joined on ``key``.

    Attributes:
        key: The join column.
        columns: Merged column order for ``matches``.
        columns1: Column order of dataset 1 (used for ``unique1``).
        columns2: Column order of dataset 2 (used for ``unique2``).
        matches: Merged rows for keys found on both sides.
        unique1: Rows of dataset 1 without a partner.
        unique2: Rows of dataset 2 whose key was never matched.
    """

    key: str
    columns: tuple[str, ...]
    columns1: tuple[str, ...]
    columns2: tuple[str, ...]
    matches: tuple[dict[str, CellValue], ...] = field(default=())
    unique1: tuple[Row, ...] = field(default=())
    unique2: tuple[Row, ...] = field(default=())

    @property
    def counts(self) -> dict[ComparisonView, int]:
        return {
            ComparisonView.MATCHES: len(self.matches),
            ComparisonView.UNIQUE1: len(self.unique1),
            ComparisonView.UNIQUE2: len(self.unique2),
        }

    def rows_for(self, view: ComparisonView) -> tuple[Row, ...]:
        if view is ComparisonView.MATCHES:
            return self.matches
        if view is ComparisonView.UNIQUE1:
            return self.unique1
        return self.unique2

    def columns_for(self, view: ComparisonView) -> tuple[str, ...]:
        if view is ComparisonView.MATCHES:
            return self.columns
        if view is ComparisonView.UNIQUE1:
            return self.columns1
        return self.columns2

    def as_dataset(self, view: ComparisonView, source_name: str = "") -> Dataset:
        """Wrap one bucket as a Dataset so it can be shown in a ViewEngine."""
        return Dataset.create(
            self.rows_for(view),
            self.columns_for(view),
            source_name=source_name or view.value,
        )


def join_datasets(dataset1: Dataset, dataset2: Dataset, key: str) -> ComparisonResult:
    """Join two datasets on ``key`` and classify every row.

    Args:
        dataset1: Left dataset; its row order is the match order.
        dataset2: Right dataset; indexed by stringified key.
        key: A column present in both datasets.

    Returns:
        The ComparisonResult.
    """
    index: dict[str, Row] = {}
    for row in dataset2.rows:
        index[stringify(row.get(key))] = row

    matches: list[dict[str, CellValue]] = []
    unique1: list[Row] = []
    matched_keys: set[str] = set()

    for row1 in dataset1.rows:
        key_text = stringify(row1.get(key))
        row2 = index.get(key_text)
        if row2 is None:
            unique1.append(row1)
            continue
        matched_keys.add(key_text)
        matches.append(merge_rows(row1, row2, key))

    unique2 = [row for row in dataset2.rows if stringify(row.get(key)) not in matched_keys]

    duplicates = len(dataset2.rows) - len(index)
    if duplicates:
        logger.info(
            "%d row(s) of %s share a key value with a later row; "
            "only the last one is used as a match target",
            duplicates,
            dataset2.source_name or "dataset 2",
        )

    return ComparisonResult(
        key=key,
        columns=tuple(merged_columns(dataset1.columns, dataset2.columns, key)),
        columns1=dataset1.columns,
        columns2=dataset2.columns,
        matches=tuple(matches),
        unique1=tuple(unique1),
        unique2=tuple(unique2),
    )


@dataclass(frozen=True)
class FieldDiff:
    """Comparison of one original column within a merged row.

    ``difference`` is ``value2 - value1`` for mismatched numbers and None
    otherwise.
    """

    column: str
    value1: CellValue
    value2: CellValue
    present1: bool
    present2: bool
    is_match: bool
    difference: int | float | None = None


def diff_merged_row(
    row: Row, columns1: Sequence[str], columns2: Sequence[str], key: str
) -> list[FieldDiff]:
    """Compare the two sides of a merged row field by field.

    Columns are taken from the union of both column lists (dataset 1 order
    first). The key is always a match. Mismatches are moved to the front;
    the order is otherwise preserved.
    """
    union = list(dict.fromkeys([*columns1, *columns2]))
    diffs: list[FieldDiff] = []

    for col in union:
        if col == key:
            value = row.get(key)
            diffs.append(FieldDiff(col, value, value, True, True, True))
            continue

        name1, name2 = qualify(col, 1), qualify(col, 2)
        present1, present2 = name1 in row, name2 in row
        value1, value2 = row.get(name1), row.get(name2)
        difference = None

        if present1 and present2:
            if is_number(value1) and is_number(value2):
                is_match = value1 == value2
                if not is_match:
                    difference = value2 - value1
            else:
                is_match = stringify(value1) == stringify(value2)
        elif not present1 and not present2:
            is_match = True
        else:
            is_match = False

        diffs.append(
            FieldDiff(col, value1, value2, present1, present2, is_match, difference)
        )

    return sorted(diffs, key=lambda d: d.is_match)


class ComparisonEngine:
    """Stateful wrapper around ``join_datasets`` for an interactive view.

    The result is recomputed lazily whenever either dataset or the key is
    replaced.

    Args:
        dataset1: Left dataset.
        dataset2: Right dataset.
        key: Join column; defaults to the first common column.

    Raises:
        IncomparableDatasetsError: If the datasets share no columns.
        InvalidJoinKeyError: If ``key`` is not a common column.
    """

    def __init__(
        self, dataset1: Dataset, dataset2: Dataset, key: str | None = None
    ) -> None:
        self._dataset1 = dataset1
        self._dataset2 = dataset2
        self._candidates = self._compute_candidates(dataset1, dataset2)
        self._key = self._validate_key(key)
        self._result: ComparisonResult | None = None

    @staticmethod
    def _compute_candidates(dataset1: Dataset, dataset2: Dataset) -> list[str]:
        candidates = common_columns(dataset1.columns, dataset2.columns)
        if not candidates:
            raise IncomparableDatasetsError(dataset1.source_name, dataset2.source_name)
        return candidates

    def _validate_key(self, key: str | None) -> str:
        if key is None:
            return self._candidates[0]
        if key not in self._candidates:
            raise InvalidJoinKeyError(
                f"'{key}' is not a column of both datasets. "
                f"Choose one of: {', '.join(self._candidates)}"
            )
        return key

    @property
    def dataset1(self) -> Dataset:
        return self._dataset1

    @property
    def dataset2(self) -> Dataset:
        return self._dataset2

    @property
    def candidate_keys(self) -> list[str]:
        return list(self._candidates)

    @property
    def key(self) -> str:
        return self._key

    def set_key(self, key: str) -> None:
        key = self._validate_key(key)
        if key != self._key:
            self._key = key
            self._result = None

    def set_datasets(self, dataset1: Dataset, dataset2: Dataset) -> None:
        """Replace either or both datasets.

        The current key is kept when it is still shared, otherwise the first
        common column is used.

        Raises:
            IncomparableDatasetsError: If the new datasets share no columns.
        """
        if dataset1 is self._dataset1 and dataset2 is self._dataset2:
            return
        candidates = self._compute_candidates(dataset1, dataset2)
        self._dataset1, self._dataset2 = dataset1, dataset2
        self._candidates = candidates
        if self._key not in candidates:
            self._key = candidates[0]
        self._result = None

    @property
    def result(self) -> ComparisonResult:
        if self._result is None:
            self._result = join_datasets(self._dataset1, self._dataset2, self._key)
            logger.debug(
                "Joined on %r: %d matches, %d unique to 1, %d unique to 2",
                self._key,
                len(self._result.matches),
                len(self._result.unique1),
                len(self._result.unique2),
            )
        return self._result

    def diff(self, merged_row: Row) -> list[FieldDiff]:
        """Field-by-field diff of a row from ``result.matches``."""
        return diff_merged_row(
            merged_row, self._dataset1.columns, self._dataset2.columns, self._key
        )
