"""
Export Mixin for background row export with progress feedback.

Provides:
- _get_output_dir(): Output directory from the app settings or default
- _export_rows(): Push an ExportingScreen and write rows in a worker thread
- _dismiss_export_screen(): Dismiss progress screen after delay

Usage:
    class MyScreen(ExportMixin, Screen):
        def action_export_csv(self):
            self._export_rows(rows, columns, "edited_sales.csv")
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Sequence

from textual import work

from datalens.config import DEFAULT_OUTPUT_DIR
from datalens.engine.values import Row
from datalens.errors import ExportError
from datalens.export import export_rows

if TYPE_CHECKING:
    from datalens.tui.screens import ExportingScreen

logger = logging.getLogger(__name__)


class ExportMixin:
    """Mixin providing threaded export of rows to CSV/XLSX files."""

    # Delay before dismissing the export completion screen
    EXPORT_COMPLETION_DELAY: float = 1.0

    def _get_output_dir(self) -> str:
        """Get the output directory from the app settings or use default."""
        settings = getattr(self.app, "settings", None)
        output_dir = getattr(settings, "output_dir", None)
        return output_dir or DEFAULT_OUTPUT_DIR

    def _dismiss_export_screen(self) -> None:
        """Dismiss the export screen after a brief delay."""
        time.sleep(self.EXPORT_COMPLETION_DELAY)
        self.app.call_from_thread(self.app.pop_screen)

    def _export_rows(
        self, rows: Sequence[Row], columns: Sequence[str], filename: str
    ) -> None:
        """Export rows to ``filename`` inside the output directory.

        An empty row list is reported as a warning without opening the
        progress screen.
        """
        if not rows:
            self.notify("There are no rows to export", severity="warning")
            return

        from datalens.tui.screens import ExportingScreen

        screen = ExportingScreen(title=f"Exporting {filename}...")
        self.app.push_screen(screen)
        self._run_export(screen, list(rows), list(columns), filename)

    @work(thread=True)
    def _run_export(
        self,
        exporting_screen: "ExportingScreen",
        rows: list[Row],
        columns: list[str],
        filename: str,
    ) -> None:
        """Write the export file in a background thread."""
        self.app.call_from_thread(
            exporting_screen.update_progress, 0, len(rows), filename
        )
        try:
            path = export_rows(rows, columns, self._get_output_dir(), filename)
        except ExportError as e:
            logger.warning("Export of %s failed: %s", filename, e)
            self.app.call_from_thread(exporting_screen.set_error, f"Export failed: {e}")
            self.app.call_from_thread(self.notify, str(e), severity="error")
        else:
            self.app.call_from_thread(
                exporting_screen.set_complete,
                f"Exported {len(rows):,} rows",
                path,
            )
            self.app.call_from_thread(self.notify, f"Exported to {path}")

        self._dismiss_export_screen()
