"""
Comparison Screen for joining two datasets on a shared key.

Shows a join-key selector, one summary card per bucket (matches, unique to
dataset 1, unique to dataset 2) and a table with the rows of the active
bucket. Selecting a matched row opens the row difference analysis.

Keys:
    1 / 2 / 3  show matches / rows unique to dataset 1 / unique to dataset 2
    enter      analyse the matched row under the cursor
    s          sort by the cursor column
    n / p      next / previous page
    v / V      drag / extend a cell selection
    r / c      select the cursor row / column
    x / X      export the active bucket to CSV / XLSX
    escape     clear the selection, or go back to the dataset grid
"""

from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Label, Select, Static

from datalens.engine.comparison import ComparisonEngine, ComparisonView
from datalens.engine.dataset import Dataset
from datalens.engine.view import ViewEngine
from datalens.errors import IncomparableDatasetsError
from datalens.export import comparison_export_name
from datalens.tui.mixins import (
    DataTableMixin,
    ExportMixin,
    GridSelectionMixin,
    VimNavigationMixin,
)
from datalens.tui.widgets import RowDiffModal, StatsBar

logger = logging.getLogger(__name__)

VIEW_KEYS = {
    "1": ComparisonView.MATCHES,
    "2": ComparisonView.UNIQUE1,
    "3": ComparisonView.UNIQUE2,
}


class ComparisonScreen(
    GridSelectionMixin, DataTableMixin, ExportMixin, VimNavigationMixin, Screen
):
    """Three-way comparison of two datasets joined on a key column."""

    CSS = """
    ComparisonScreen {
        layout: vertical;
    }

    #key-bar {
        height: 3;
        padding: 0 1;
    }

    #key-bar Label {
        padding: 1 1;
    }

    #key-select {
        width: 30;
    }

    #view-cards {
        height: 5;
    }

    .view-card {
        width: 1fr;
        height: 5;
        border: round $primary-darken-2;
        padding: 0 1;
    }

    .view-card.active {
        border: round $accent;
        text-style: bold;
    }

    #comparison-table {
        height: 1fr;
    }

    #no-common-columns {
        align: center middle;
        height: 1fr;
    }

    #no-common-columns Label {
        width: 100%;
        text-align: center;
    }

    .notice-title {
        text-style: bold;
        color: $warning;
    }
    """

    BINDINGS = (
        VimNavigationMixin.VIM_BINDINGS
        + GridSelectionMixin.GRID_BINDINGS
        + [
            Binding("1", "show_view('matches')", "Matches"),
            Binding("2", "show_view('unique1')", "Unique 1"),
            Binding("3", "show_view('unique2')", "Unique 2"),
            Binding("s", "sort", "Sort", show=False),
            Binding("x", "export_csv", "CSV"),
            Binding("X", "export_xlsx", "XLSX"),
            Binding("escape", "escape", "Back"),
            Binding("q", "quit", "Quit"),
        ]
    )

    def __init__(
        self,
        dataset1: Dataset,
        dataset2: Dataset,
        *,
        key: str | None = None,
        page_size: int | None = None,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the ComparisonScreen.

        Args:
            dataset1: Left dataset.
            dataset2: Right dataset.
            key: Initial join column; defaults to the first common column.
            page_size: Rows per page for the bucket table.
        """
        super().__init__(name=name, id=id, classes=classes)
        self.dataset1 = dataset1
        self.dataset2 = dataset2
        self._page_size = page_size
        self.view = ComparisonView.MATCHES
        self.comparison: ComparisonEngine | None
        try:
            self.comparison = ComparisonEngine(dataset1, dataset2, key)
        except IncomparableDatasetsError as e:
            logger.info("%s", e)
            self.comparison = None
        self.engine: ViewEngine | None = None

    @property
    def source1(self) -> str:
        return self.dataset1.source_name or "File 1"

    @property
    def source2(self) -> str:
        return self.dataset2.source_name or "File 2"

    def compose(self) -> ComposeResult:
        yield Header()
        if self.comparison is None:
            with Vertical(id="no-common-columns"):
                yield Label("No Common Columns", classes="notice-title")
                yield Label(
                    f"{self.source1} and {self.source2} do not share any column "
                    "names, so they cannot be automatically compared."
                )
        else:
            with Horizontal(id="key-bar"):
                yield Label("Match rows where")
                yield Select(
                    [(col, col) for col in self.comparison.candidate_keys],
                    value=self.comparison.key,
                    allow_blank=False,
                    id="key-select",
                )
                yield Label("is the same.")
            with Horizontal(id="view-cards"):
                yield Static(id="card-matches", classes="view-card")
                yield Static(id="card-unique1", classes="view-card")
                yield Static(id="card-unique2", classes="view-card")
            yield DataTable(id="comparison-table")
            yield StatsBar(id="stats-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.title = f"Comparison - {self.source1} vs {self.source2}"
        if self.comparison is None:
            return
        table = self._setup_table("comparison-table", cursor_type="cell")
        self._show_result()
        table.focus()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def table(self) -> DataTable:
        return self.query_one("#comparison-table", DataTable)

    def _refresh_table(self) -> None:
        self._fill_table(self.table, self.engine)
        self._refresh_stats()

    def _refresh_stats(self) -> None:
        self.query_one("#stats-bar", StatsBar).refresh_from(self.engine)

    def _card_text(self, view: ComparisonView, count: int) -> str:
        if view is ComparisonView.MATCHES:
            return f"[1] Matches Found\n{count:,}\nRows in both files"
        if view is ComparisonView.UNIQUE1:
            return f"[2] Unique to {self.source1}\n{count:,}\nRows only in File 1"
        return f"[3] Unique to {self.source2}\n{count:,}\nRows only in File 2"

    def _show_result(self) -> None:
        """Render the cards and the active bucket from the current result."""
        result = self.comparison.result
        for view, count in result.counts.items():
            card = self.query_one(f"#card-{view.value}", Static)
            card.update(self._card_text(view, count))
            card.set_class(view is self.view, "active")

        self.engine = ViewEngine(
            result.as_dataset(self.view), page_size=self._page_size, editable=False
        )
        self._refresh_table()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def on_select_changed(self, event: Select.Changed) -> None:
        if self.comparison is None or event.value is Select.BLANK:
            return
        if event.value == self.comparison.key:
            return
        self.comparison.set_key(str(event.value))
        logger.debug("Join key changed to %r", event.value)
        self._show_result()

    def action_show_view(self, view_name: str) -> None:
        if self.comparison is None:
            return
        view = ComparisonView(view_name)
        if view is not self.view:
            self.view = view
            self._show_result()

    def action_sort(self) -> None:
        position = self._cursor_position()
        if position is None:
            return
        self.engine.sort_by(self.engine.columns[position[1]])
        self._refresh_table()

    def on_data_table_header_selected(self, event: DataTable.HeaderSelected) -> None:
        event.stop()
        if self.engine is None:
            return
        self.engine.sort_by(self.engine.columns[event.column_index])
        self._refresh_table()

    def on_data_table_cell_selected(self, event: DataTable.CellSelected) -> None:
        """Open the row difference analysis for the matched row under the cursor."""
        event.stop()
        if self.comparison is None or self.view is not ComparisonView.MATCHES:
            return
        position = self._cursor_position()
        if position is None:
            return
        indexed = self.engine.row_at(position[0])
        if indexed is None:
            return
        row = indexed.row
        key = self.comparison.key
        self.app.push_screen(
            RowDiffModal(
                key=key,
                key_value=row.get(key),
                diffs=self.comparison.diff(row),
                source1=self.source1,
                source2=self.source2,
            )
        )

    def _export(self, ext: str) -> None:
        if self.comparison is None:
            self.notify("Nothing to export", severity="warning")
            return
        result = self.comparison.result
        source = self.source1 if self.view is ComparisonView.UNIQUE1 else self.source2
        self._export_rows(
            result.rows_for(self.view),
            result.columns_for(self.view),
            comparison_export_name(self.view, source, ext),
        )

    def action_export_csv(self) -> None:
        self._export("csv")

    def action_export_xlsx(self) -> None:
        self._export("xlsx")

    def action_escape(self) -> None:
        if not self._clear_selection():
            self.app.pop_screen()

    def action_quit(self) -> None:
        self.app.exit()
