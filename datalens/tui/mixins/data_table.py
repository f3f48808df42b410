"""
DataTable Mixin for consistent table setup and rendering of engine rows.

Provides reusable methods for:
- _configure_table(): Apply configuration to a DataTable
- _setup_table(): Look up a DataTable by id and configure it
- _fill_table(): Render the current page of a ViewEngine into a DataTable
- _repaint_selection(): Restyle cells after the selection changed

Rows are keyed by their original index so that a cursor event can always be
traced back to the row in the Dataset, whatever the sort order.

Usage:
    class MyScreen(DataTableMixin, Screen):
        def compose(self):
            yield DataTable(id="my-table")

        def on_mount(self):
            table = self._setup_table("my-table", cursor_type="cell")
            self._fill_table(table, self.engine)
"""

from __future__ import annotations

from rich.text import Text
from textual.coordinate import Coordinate
from textual.widgets import DataTable

from datalens.engine.values import CellValue, is_number, stringify
from datalens.engine.view import SortSpec, ViewEngine

# Display width cap for a single column
MAX_COLUMN_WIDTH = 40

SELECTED_STYLE = "bold reverse"
EDITING_STYLE = "bold underline"


def format_cell(value: CellValue, *, selected: bool = False, editing: bool = False) -> Text:
    """Render a cell value for the grid.

    Null cells render empty, numbers are right-aligned.
    """
    text = Text(stringify(value), no_wrap=True, overflow="ellipsis")
    if is_number(value):
        text.justify = "right"
    if selected:
        text.stylize(SELECTED_STYLE)
    if editing:
        text.stylize(EDITING_STYLE)
    return text


def column_label(column: str, sort: SortSpec | None) -> str:
    """Header label with a sort indicator on the sorted column."""
    if sort is None or sort.key != column:
        return column
    return f"{column} {'▲' if sort.ascending else '▼'}"


class DataTableMixin:
    """Mixin providing consistent DataTable setup and ViewEngine rendering."""

    def _configure_table(
        self,
        table: DataTable,
        columns: list[tuple[str, int | None]] | None = None,
        *,
        cursor_type: str = "cell",
        zebra_stripes: bool = True,
    ) -> None:
        """Apply configuration to a DataTable.

        Args:
            table: The DataTable instance to configure.
            columns: List of (column_name, width) tuples. Width can be None.
            cursor_type: Cursor type ('row', 'cell', or 'none').
            zebra_stripes: Whether to enable zebra striping.
        """
        table.cursor_type = cursor_type
        table.zebra_stripes = zebra_stripes
        for name, width in columns or []:
            table.add_column(name, width=width, key=name)

    def _setup_table(
        self,
        table_id: str,
        columns: list[tuple[str, int | None]] | None = None,
        *,
        cursor_type: str = "cell",
        zebra_stripes: bool = True,
    ) -> DataTable:
        """Set up a DataTable with consistent configuration.

        Returns:
            The configured DataTable instance.
        """
        table = self.query_one(f"#{table_id}", DataTable)
        self._configure_table(
            table, columns, cursor_type=cursor_type, zebra_stripes=zebra_stripes
        )
        return table

    def _fill_table(self, table: DataTable, engine: ViewEngine) -> None:
        """Replace the table contents with the engine's current page.

        Columns are rebuilt too, since the sort indicator lives in the
        header labels.
        """
        cursor = table.cursor_coordinate
        table.clear(columns=True)

        for column in engine.columns:
            table.add_column(column_label(column, engine.sort), key=column)

        offset = engine.page_offset
        for page_pos, indexed in enumerate(engine.page_rows):
            row_index = offset + page_pos
            cells = [
                format_cell(
                    indexed.get(column),
                    selected=engine.is_selected(row_index, col_index),
                    editing=engine.is_editing_cell(indexed.original_index, column),
                )
                for col_index, column in enumerate(engine.columns)
            ]
            table.add_row(
                *cells,
                key=str(indexed.original_index),
                label=str(indexed.original_index + 1),
            )

        if table.row_count and engine.columns:
            table.move_cursor(
                row=min(cursor.row, table.row_count - 1),
                column=min(cursor.column, len(engine.columns) - 1),
                animate=False,
            )

    def _repaint_selection(self, table: DataTable, engine: ViewEngine) -> None:
        """Restyle the cells of the current page in place.

        Cheaper than ``_fill_table`` and leaves the cursor where it is, so it
        is safe to call from cursor events.
        """
        offset = engine.page_offset
        for page_pos, indexed in enumerate(engine.page_rows):
            if page_pos >= table.row_count:
                break
            row_index = offset + page_pos
            for col_index, column in enumerate(engine.columns):
                table.update_cell_at(
                    Coordinate(page_pos, col_index),
                    format_cell(
                        indexed.get(column),
                        selected=engine.is_selected(row_index, col_index),
                        editing=engine.is_editing_cell(indexed.original_index, column),
                    ),
                )
