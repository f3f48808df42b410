"""Modal screen with the field-by-field analysis of one matched row."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import DataTable, Label

from datalens.engine.comparison import FieldDiff
from datalens.engine.values import CellValue, format_number, stringify

MISSING = "MISSING"


def format_side(value: CellValue, present: bool) -> Text:
    if not present:
        return Text(MISSING, style="dim")
    return Text(stringify(value))


def format_difference(diff: FieldDiff) -> Text:
    """Status column: "Match", or "Mismatch" plus a signed numeric delta."""
    if diff.is_match:
        return Text("Match", style="green")
    text = Text("Mismatch", style="bold red")
    if diff.difference is not None:
        sign = "+" if diff.difference > 0 else ""
        text.append(f"  {sign}{format_number(diff.difference)}", style="red")
    return text


class RowDiffModal(ModalScreen[None]):
    """Row difference analysis for a matched pair.

    Mismatched columns are listed first and highlighted.
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("enter", "close", "Close"),
        Binding("q", "close", "Close", show=False),
    ]

    CSS = """
    RowDiffModal {
        align: center middle;
    }

    RowDiffModal > Vertical {
        width: 90%;
        height: 80%;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }

    RowDiffModal .modal-header {
        dock: top;
        width: 100%;
        height: auto;
        padding: 1 2;
        background: $primary;
        color: $text;
        text-align: center;
        text-style: bold;
    }

    RowDiffModal .modal-subtitle {
        width: 100%;
        padding: 0 2;
        color: $text-muted;
    }

    RowDiffModal DataTable {
        height: 1fr;
    }

    RowDiffModal .close-hint {
        dock: bottom;
        width: 100%;
        height: auto;
        padding: 1 2;
        text-align: center;
        color: $text-muted;
    }
    """

    def __init__(
        self,
        key: str,
        key_value: CellValue,
        diffs: list[FieldDiff],
        source1: str = "File 1",
        source2: str = "File 2",
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the modal.

        Args:
            key: The join column.
            key_value: Value of the join column for this row.
            diffs: Field comparisons, mismatches first.
            source1: Display name of dataset 1.
            source2: Display name of dataset 2.
        """
        super().__init__(name=name, id=id, classes=classes)
        self.key = key
        self.key_value = key_value
        self.diffs = diffs
        self.source1 = source1
        self.source2 = source2

    @property
    def mismatch_count(self) -> int:
        return sum(1 for diff in self.diffs if not diff.is_match)

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label("Row Difference Analysis", classes="modal-header")
            yield Label(
                f"Comparing {self.key}: {stringify(self.key_value)}  "
                f"({self.mismatch_count} of {len(self.diffs)} columns differ)",
                classes="modal-subtitle",
            )
            yield DataTable(id="diff-table", cursor_type="row", zebra_stripes=True)
            yield Label("Press [ESC] or [ENTER] to close", classes="close-hint")

    def on_mount(self) -> None:
        table = self.query_one("#diff-table", DataTable)
        table.add_columns("Column", self.source1, self.source2, "Difference")
        for diff in self.diffs:
            column = Text(diff.column, style="bold" if not diff.is_match else "")
            table.add_row(
                column,
                format_side(diff.value1, diff.present1),
                format_side(diff.value2, diff.present2),
                format_difference(diff),
                key=diff.column,
            )
        table.focus()

    def action_close(self) -> None:
        self.dismiss(None)
