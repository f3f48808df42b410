"""
Progress Screen components for background task feedback.

Provides a base ProgressScreen class and specialized variants for
loading and exporting operations.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Center, Middle
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Footer, Header, Static


class ProgressScreen(Screen):
    """Base screen for displaying progress of background tasks.

    Usage:
        screen = ProgressScreen(title="Working...")
        screen.update_status("Parsing rows")
        screen.update_progress(5_000, 20_000)
        screen.set_complete("Done!")
    """

    CSS = """
    ProgressScreen {
        align: center middle;
    }

    .progress-container {
        width: 60;
        height: auto;
        border: round $primary;
        padding: 1 2;
        background: $surface;
    }

    .progress-title {
        text-style: bold;
        text-align: center;
        color: $accent;
    }

    .progress-status {
        text-align: center;
        margin-top: 1;
    }

    .progress-detail {
        text-align: center;
        color: $text-muted;
    }
    """

    # Subclasses can override these
    TITLE_DEFAULT: str = "Processing..."

    def __init__(
        self,
        title: str | None = None,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the progress screen.

        Args:
            title: Title text to display. Uses TITLE_DEFAULT if not provided.
            name: Optional screen name.
            id: Optional screen ID.
            classes: Optional CSS classes.
        """
        super().__init__(name=name, id=id, classes=classes)
        self._title_text = title or self.TITLE_DEFAULT
        self._status_text = "Preparing..."
        self._detail_text = ""

    def compose(self) -> ComposeResult:
        """Compose the progress screen layout."""
        yield Header()
        with Center():
            with Middle(id=self._get_container_id(), classes="progress-container"):
                yield Static(self._title_text, id="progress-title", classes="progress-title")
                yield Static(self._status_text, id="progress-status", classes="progress-status")
                yield Static(self._detail_text, id="progress-detail", classes="progress-detail")
        yield Footer()

    def _get_container_id(self) -> str:
        """Return the container ID. Override in subclasses for custom CSS."""
        return "progress-container"

    def _set_text(self, widget_id: str, text: str) -> None:
        # Updates can arrive from a worker before the screen is composed
        try:
            self.query_one(f"#{widget_id}", Static).update(text)
        except NoMatches:
            pass

    def update_status(self, status: str) -> None:
        """Update the main status message."""
        self._status_text = status
        self._set_text("progress-status", status)

    def update_detail(self, detail: str) -> None:
        """Update the detail/progress text."""
        self._detail_text = detail
        self._set_text("progress-detail", detail)

    def update_progress(self, current: int, total: int | None = None, item: str = "") -> None:
        """Update progress with current/total counts.

        Args:
            current: Current item count.
            total: Total items (None if unknown).
            item: Optional description of current item.
        """
        if item:
            self.update_status(f"Processing: {item}")

        if total is not None and total > 0:
            percent = (current / total) * 100
            self.update_detail(f"{current:,} / {total:,} ({percent:.0f}%)")
        else:
            self.update_detail(f"{current:,} processed")

    def set_complete(self, message: str, detail: str = "") -> None:
        """Show completion state."""
        self._set_text("progress-title", "Complete")
        self.update_status(message)
        self.update_detail(detail)

    def set_error(self, message: str, detail: str = "") -> None:
        """Show error state."""
        self._set_text("progress-title", "Error")
        self.update_status(message)
        self.update_detail(detail)


class LoadingScreen(ProgressScreen):
    """Screen displayed while loading a data file."""

    TITLE_DEFAULT = "Loading..."

    def __init__(
        self,
        filename: str = "",
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        title = f"Loading {filename}..." if filename else "Loading..."
        super().__init__(title=title, name=name, id=id, classes=classes)
        self.filename = filename
        self._loaded_count = 0

    def _get_container_id(self) -> str:
        return "loading-container"

    def update_loaded_count(self, count: int, total: int | None = None) -> None:
        """Update the count of loaded rows.

        Args:
            count: Number of rows loaded so far.
            total: Total number of rows (if known).
        """
        self._loaded_count = count
        self.update_status("Reading rows...")
        self.update_progress(count, total)


class ExportingScreen(ProgressScreen):
    """Screen displayed while writing an export file."""

    TITLE_DEFAULT = "Exporting..."

    def _get_container_id(self) -> str:
        return "exporting-container"
