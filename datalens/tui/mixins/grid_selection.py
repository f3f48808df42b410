"""
Grid Selection Mixin for paging and cell selection over a ViewEngine table.

Provides the page and selection keybindings shared by every screen that
renders a ViewEngine into a cell-cursor DataTable.

The host screen supplies:
- self.engine: the ViewEngine being shown
- self.table: the DataTable it is rendered into
- _refresh_table(): re-render the page and the stats bar
- _refresh_stats(): re-render the stats bar only

Usage:
    class MyScreen(GridSelectionMixin, DataTableMixin, Screen):
        BINDINGS = GridSelectionMixin.GRID_BINDINGS + [...]
"""

from __future__ import annotations

from textual.binding import Binding
from textual.widgets import DataTable


class GridSelectionMixin:
    """Mixin providing paging and rectangular selection actions."""

    GRID_BINDINGS = [
        Binding("n", "next_page", "Next Page"),
        Binding("p", "previous_page", "Prev Page"),
        Binding("v", "toggle_visual", "Select"),
        Binding("V", "extend_selection", "Extend", show=False),
        Binding("r", "select_row", "Row", show=False),
        Binding("c", "select_column", "Column", show=False),
    ]

    def _cursor_position(self) -> tuple[int, int] | None:
        """Visible row index and column index under the table cursor."""
        if self.engine is None:
            return None
        table = self.table
        if table.row_count == 0 or not self.engine.columns:
            return None
        coordinate = table.cursor_coordinate
        return self.engine.page_offset + coordinate.row, coordinate.column

    def _refresh_selection(self) -> None:
        self._repaint_selection(self.table, self.engine)
        self._refresh_stats()

    def action_next_page(self) -> None:
        if self.engine is None:
            return
        before = self.engine.page
        if self.engine.next_page() != before:
            self._refresh_table()

    def action_previous_page(self) -> None:
        if self.engine is None:
            return
        before = self.engine.page
        if self.engine.previous_page() != before:
            self._refresh_table()

    def action_toggle_visual(self) -> None:
        if self.engine is None:
            return
        if self.engine.is_dragging:
            self.engine.release()
            self._refresh_stats()
            return
        position = self._cursor_position()
        if position is None:
            return
        self.engine.press(*position)
        self._refresh_selection()

    def action_extend_selection(self) -> None:
        position = self._cursor_position()
        if position is None:
            return
        self.engine.press(*position, extend=True)
        self.engine.release()
        self._refresh_selection()

    def on_data_table_cell_highlighted(self, event: DataTable.CellHighlighted) -> None:
        if self.engine is None or not self.engine.is_dragging:
            return
        position = self._cursor_position()
        if position is not None:
            self.engine.enter(*position)
            self._refresh_selection()

    def action_select_row(self) -> None:
        position = self._cursor_position()
        if position is not None:
            self.engine.select_row(position[0])
            self._refresh_selection()

    def action_select_column(self) -> None:
        position = self._cursor_position()
        if position is not None:
            self.engine.select_column(position[1])
            self._refresh_selection()

    def _clear_selection(self) -> bool:
        """Drop the selection; returns False when there was none."""
        if self.engine is None or self.engine.selection is None:
            return False
        self.engine.clear_selection()
        self._refresh_selection()
        return True
