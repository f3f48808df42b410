"""Footer line with row counts, paging and selection statistics."""

from __future__ import annotations

from textual.widgets import Static

from datalens.engine.stats import SelectionStats
from datalens.engine.view import ViewEngine


def describe_view(engine: ViewEngine, stats: SelectionStats | None = None) -> str:
    """Build the status text for a view.

    Examples:
        "Showing 12 of 40 rows  |  Page 1/1"
        "Showing 40 of 40 rows  |  Page 2/3  |  Cells: 6  Numeric: 6  Sum: 21 ..."
    """
    parts = [f"Showing {engine.visible_count:,} of {len(engine.dataset):,} rows"]
    if engine.page_size:
        parts.append(f"Page {engine.page}/{engine.page_count}")
    if engine.search_term:
        parts.append(f"Filter: {engine.search_term!r}")
    if stats is not None:
        parts.append(stats.describe())
    return "  |  ".join(parts)


class StatsBar(Static):
    """One-line summary docked under a dataset table."""

    DEFAULT_CSS = """
    StatsBar {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $primary-darken-2;
        color: $text;
    }
    """

    def refresh_from(self, engine: ViewEngine) -> None:
        """Re-render the bar from the engine's current state."""
        self.update(describe_view(engine, engine.selection_stats()))
