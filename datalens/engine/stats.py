"""
Aggregate statistics over a cell selection.

Cells that cannot be coerced to a number still count towards ``cell_count``
but are left out of the numeric aggregates, so a stray label inside a block
of figures never breaks the summary.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Iterable

from datalens.engine.values import CellValue, coerce_number, format_number


@dataclass(frozen=True)
class SelectionStats:
    """Summary of the selected cells.

    The numeric fields are None when ``numeric_count`` is 0.
    """

    cell_count: int
    numeric_count: int
    sum: float | None = None
    mean: float | None = None
    median: float | None = None
    min: float | None = None
    max: float | None = None

    @property
    def has_numeric(self) -> bool:
        return self.numeric_count > 0

    def as_dict(self) -> dict[str, int | float | None]:
        return {
            "cell_count": self.cell_count,
            "numeric_count": self.numeric_count,
            "sum": self.sum,
            "mean": self.mean,
            "median": self.median,
            "min": self.min,
            "max": self.max,
        }

    def describe(self) -> str:
        """One-line human readable summary for status bars."""
        parts = [f"Cells: {self.cell_count}", f"Numeric: {self.numeric_count}"]
        if self.has_numeric:
            parts.extend(
                [
                    f"Sum: {_fmt(self.sum)}",
                    f"Mean: {_fmt(self.mean)}",
                    f"Median: {_fmt(self.median)}",
                    f"Min: {_fmt(self.min)}",
                    f"Max: {_fmt(self.max)}",
                ]
            )
        return "  ".join(parts)


def _fmt(value: float | None) -> str:
    if value is None:
        return "-"
    return format_number(round(value, 6))


def summarize(values: Iterable[CellValue]) -> SelectionStats | None:
    """Compute statistics over a sequence of cell values.

    Args:
        values: The selected cells, in any order.

    Returns:
        SelectionStats, or None when there are no cells at all.

    Examples:
        >>> summarize([1, 2, 3, 4, 5, 6]).median
        3.5
        >>> summarize(["a", 2]).numeric_count
        1
    """
    cell_count = 0
    numbers: list[int | float] = []
    for value in values:
        cell_count += 1
        number = coerce_number(value)
        if number is not None:
            numbers.append(number)

    if cell_count == 0:
        return None
    if not numbers:
        return SelectionStats(cell_count=cell_count, numeric_count=0)

    try:
        total = math.fsum(numbers)
    except OverflowError:
        # Finite inputs whose running sum leaves the float range
        total = sum(float(number) for number in numbers)
    return SelectionStats(
        cell_count=cell_count,
        numeric_count=len(numbers),
        sum=total,
        mean=total / len(numbers),
        median=statistics.median(numbers),
        min=min(numbers),
        max=max(numbers),
    )
