"""Modal asking for the path of a second dataset to compare against."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label


class PathPromptModal(ModalScreen[str | None]):
    """Dismisses with the entered path, or None when cancelled."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    CSS = """
    PathPromptModal {
        align: center middle;
    }

    PathPromptModal > Vertical {
        width: 70;
        height: auto;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }

    PathPromptModal Label {
        width: 100%;
        margin-bottom: 1;
    }
    """

    def __init__(self, prompt: str = "Path of the dataset to compare with:") -> None:
        super().__init__()
        self.prompt = prompt

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self.prompt)
            yield Input(placeholder="e.g. sales_2024.csv", id="path-input")

    def on_mount(self) -> None:
        self.query_one("#path-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        value = event.value.strip()
        self.dismiss(value or None)

    def action_cancel(self) -> None:
        self.dismiss(None)
