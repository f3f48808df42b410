"""
Dataset Screen: the interactive grid for a single dataset.

Shows the current page of a ViewEngine in a DataTable with a search box on
top and a statistics bar underneath. Every user action is forwarded to the
engine; the table is then re-rendered from the engine state.

Keys:
    /          focus the search box (Enter or Escape returns to the grid)
    s          sort by the cursor column (again to flip direction)
    n / p      next / previous page
    v          start a drag selection at the cursor; v again to finish
    V          extend the selection to the cursor, keeping its anchor
    r / c      select the cursor row / column
    escape     clear the selection (or cancel an open edit)
    e, enter   edit the cursor cell (enter commits, escape cancels)
    a / d      add a row / delete the cursor row
    x / X      export the dataset to CSV / XLSX
    C          compare with a second dataset
"""

from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Input, Label

from datalens.engine.dataset import Dataset
from datalens.engine.view import ViewEngine
from datalens.errors import DatalensError
from datalens.export import edited_file_name
from datalens.tui.mixins import (
    DataTableMixin,
    ExportMixin,
    GridSelectionMixin,
    VimNavigationMixin,
)
from datalens.tui.widgets import StatsBar

logger = logging.getLogger(__name__)


class DatasetScreen(
    GridSelectionMixin, DataTableMixin, ExportMixin, VimNavigationMixin, Screen
):
    """Searchable, sortable, selectable and editable grid for one dataset."""

    CSS = """
    DatasetScreen {
        layout: vertical;
    }

    #search-input {
        dock: top;
        height: 3;
    }

    #edit-bar {
        height: auto;
        display: none;
    }

    #edit-bar.editing {
        display: block;
    }

    #edit-label {
        padding: 0 1;
        color: $warning;
    }

    #dataset-table {
        height: 1fr;
    }

    #empty-notice {
        height: auto;
        padding: 1 2;
        color: $text-muted;
        display: none;
    }

    #empty-notice.visible {
        display: block;
    }
    """

    BINDINGS = (
        VimNavigationMixin.VIM_BINDINGS
        + GridSelectionMixin.GRID_BINDINGS
        + [
            Binding("/", "focus_search", "Search"),
            Binding("s", "sort", "Sort"),
            Binding("escape", "escape", "Clear", show=False),
            Binding("e", "edit_cell", "Edit"),
            Binding("a", "add_row", "Add Row"),
            Binding("d", "delete_row", "Delete Row"),
            Binding("x", "export_csv", "CSV"),
            Binding("X", "export_xlsx", "XLSX"),
            Binding("C", "compare", "Compare"),
            Binding("q", "quit", "Quit"),
        ]
    )

    class DatasetChanged(Message):
        """Posted after an edit, insertion or deletion produced a new snapshot."""

        def __init__(self, dataset: Dataset) -> None:
            super().__init__()
            self.dataset = dataset

    class CompareRequested(Message):
        """Posted when the user asks to compare the dataset with another one."""

    def __init__(
        self,
        dataset: Dataset,
        *,
        page_size: int | None = None,
        editable: bool = True,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the DatasetScreen.

        Args:
            dataset: The snapshot to display.
            page_size: Rows per page, or None to show every row.
            editable: Whether cells can be edited and rows added/deleted.
        """
        super().__init__(name=name, id=id, classes=classes)
        self.engine = ViewEngine(dataset, page_size=page_size, editable=editable)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(placeholder="Search data...", id="search-input")
        with Vertical(id="edit-bar"):
            yield Label("", id="edit-label")
            yield Input(id="edit-input")
        yield Label("", id="empty-notice")
        yield DataTable(id="dataset-table")
        yield StatsBar(id="stats-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.title = f"datalens - {self.engine.dataset.source_name or 'dataset'}"
        table = self._setup_table("dataset-table", cursor_type="cell")
        self._refresh_table()
        table.focus()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def table(self) -> DataTable:
        return self.query_one("#dataset-table", DataTable)

    def _refresh_table(self) -> None:
        """Re-render the grid, empty-state notice and footer."""
        self._fill_table(self.table, self.engine)
        notice = self.query_one("#empty-notice", Label)
        if self.engine.visible_count == 0 and self.engine.search_term:
            notice.update(f'No matches found for "{self.engine.search_term}"')
            notice.add_class("visible")
        else:
            notice.remove_class("visible")
        self._refresh_stats()

    def _refresh_stats(self) -> None:
        self.query_one("#stats-bar", StatsBar).refresh_from(self.engine)

    def _move_cursor_to(self, original_index: int, col_index: int) -> bool:
        """Show the page holding a row and put the cursor on it.

        Returns False when the row is not visible.
        """
        position = self.engine.position_of(original_index)
        if position is None:
            return False
        if self.engine.page_size:
            page = position // self.engine.page_size + 1
            if page != self.engine.page:
                self.engine.set_page(page)
                self._refresh_table()
        self.table.move_cursor(
            row=position - self.engine.page_offset, column=col_index, animate=False
        )
        return True

    def _dataset_replaced(self) -> None:
        self._refresh_table()
        self.post_message(self.DatasetChanged(self.engine.dataset))

    # ------------------------------------------------------------------
    # Search and sort
    # ------------------------------------------------------------------

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search-input":
            self.engine.set_search_term(event.value)
            self._refresh_table()
        elif event.input.id == "edit-input":
            self.engine.update_edit_text(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        if event.input.id == "search-input":
            self.table.focus()
        elif event.input.id == "edit-input":
            self._commit_edit()

    def action_sort(self) -> None:
        position = self._cursor_position()
        if position is None:
            return
        self._sort_by(self.engine.columns[position[1]])

    def on_data_table_header_selected(self, event: DataTable.HeaderSelected) -> None:
        event.stop()
        self._sort_by(self.engine.columns[event.column_index])

    def _sort_by(self, column: str) -> None:
        spec = self.engine.sort_by(column)
        logger.debug("Sorted by %r (%s)", spec.key, spec.direction.value)
        self._refresh_table()

    def action_escape(self) -> None:
        if self.engine.is_editing:
            self._cancel_edit()
        elif self.focused is not self.table:
            self.table.focus()
        else:
            self._clear_selection()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def on_data_table_cell_selected(self, event: DataTable.CellSelected) -> None:
        event.stop()
        if self.engine.editable:
            self.action_edit_cell()

    def action_edit_cell(self) -> None:
        if not self.engine.editable:
            self.notify("This dataset is read-only", severity="warning")
            return
        position = self._cursor_position()
        if position is None:
            return

        row_index, col_index = position
        column = self.engine.columns[col_index]
        target = self.engine.row_at(row_index)
        if target is None:
            return
        if self.engine.is_editing:
            # Committing can re-sort, so the target is tracked by original index
            self._commit_edit()
            if not self._move_cursor_to(target.original_index, col_index):
                return
        try:
            state = self.engine.begin_edit_at(target.original_index, column)
        except DatalensError as e:
            self.notify(str(e), severity="error")
            return
        if state is None:
            return

        self.query_one("#edit-label", Label).update(
            f"Editing row {state.original_index + 1}, column '{column}' "
            "(enter to save, escape to cancel)"
        )
        edit_input = self.query_one("#edit-input", Input)
        edit_input.value = state.staged_text
        self.query_one("#edit-bar").add_class("editing")
        self._refresh_selection()
        edit_input.focus()

    def _commit_edit(self) -> None:
        dataset = self.engine.commit_edit()
        self._close_edit_bar()
        if dataset is not None:
            self._dataset_replaced()

    def _cancel_edit(self) -> None:
        self.engine.cancel_edit()
        self._close_edit_bar()
        self._refresh_selection()

    def _close_edit_bar(self) -> None:
        self.query_one("#edit-bar").remove_class("editing")
        self.table.focus()

    # ------------------------------------------------------------------
    # Row lifecycle
    # ------------------------------------------------------------------

    def action_add_row(self) -> None:
        if not self.engine.editable:
            self.notify("This dataset is read-only", severity="warning")
            return
        if self.engine.is_editing:
            self._commit_edit()
        dataset = self.engine.add_row()
        new_index = dataset.next_index - 1
        self._dataset_replaced()
        if not self._move_cursor_to(new_index, 0):
            self.notify("Row added; it is hidden by the current search")

    def action_delete_row(self) -> None:
        if not self.engine.editable:
            self.notify("This dataset is read-only", severity="warning")
            return
        position = self._cursor_position()
        if position is None:
            return
        indexed = self.engine.row_at(position[0])
        if indexed is None:
            return
        if self.engine.is_editing:
            self._cancel_edit()
        self.engine.delete_row(indexed.original_index)
        self._dataset_replaced()
        self.notify(f"Deleted row {indexed.original_index + 1}")

    # ------------------------------------------------------------------
    # Export and comparison
    # ------------------------------------------------------------------

    def _export(self, ext: str) -> None:
        dataset = self.engine.dataset
        self._export_rows(
            list(dataset.rows),
            dataset.columns,
            edited_file_name(dataset.source_name or "export.csv", ext),
        )

    def action_export_csv(self) -> None:
        self._export("csv")

    def action_export_xlsx(self) -> None:
        self._export("xlsx")

    def action_compare(self) -> None:
        if self.engine.is_editing:
            self._commit_edit()
        self.post_message(self.CompareRequested())

    def action_quit(self) -> None:
        self.app.exit()
