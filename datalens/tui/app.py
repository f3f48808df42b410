"""
Main Textual application for datalens.

This is the entry point for the TUI that explores a single tabular dataset
and, optionally, compares it with a second one joined on a shared column.

Supported Formats:
    - CSV / TSV (.csv, .txt, .tsv, .tab)
    - JSONL (.jsonl, .ndjson): One JSON object per line
    - JSON (.json): Array of JSON objects
    - Parquet (.parquet, .pq): Apache Parquet columnar format
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable

from textual.app import App
from textual.binding import Binding

from datalens import __version__
from datalens.config import DEFAULT_OUTPUT_DIR, DEFAULT_PAGE_SIZE, LOG_LEVELS, Settings
from datalens.engine.dataset import Dataset
from datalens.errors import DatasetLoadError
from datalens.logging_setup import configure_logging
from datalens.tui.data_loader import load_dataset
from datalens.tui.mixins import BackgroundTaskMixin
from datalens.tui.views import ComparisonScreen, DatasetScreen
from datalens.tui.widgets import PathPromptModal

logger = logging.getLogger(__name__)


class DatalensApp(BackgroundTaskMixin, App):
    """A Textual app for exploring and comparing tabular datasets."""

    TITLE = "datalens"

    CSS = """
    Screen {
        background: $surface;
    }

    Header {
        dock: top;
        height: 3;
        background: $primary;
        color: $text;
    }

    Footer {
        dock: bottom;
        height: 1;
        background: $primary-darken-2;
    }

    DataTable {
        height: 100%;
        background: $surface;
    }

    DataTable > .datatable--header {
        background: $primary-darken-1;
        color: $text;
        text-style: bold;
    }

    DataTable > .datatable--cursor {
        background: $secondary;
        color: $text;
    }

    DataTable > .datatable--hover {
        background: $primary-lighten-1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=False),
    ]

    def __init__(
        self,
        path: str,
        compare_path: str | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the app with a data file.

        Args:
            path: Path to the primary dataset.
            compare_path: Path to a second dataset to compare against.
            settings: Viewer settings; defaults are used when omitted.
        """
        super().__init__()
        self._path = path
        self._compare_path = compare_path
        self.settings = settings or Settings()

        self.dataset: Dataset | None = None
        self.compare_dataset: Dataset | None = None

    def on_mount(self) -> None:
        """Load the primary dataset and push the grid screen."""
        self._open(self._path, self._on_primary_loaded, fatal=True)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _open(
        self,
        path: str,
        on_complete: Callable[[Dataset], None],
        *,
        fatal: bool = False,
    ) -> None:
        """Load ``path`` synchronously, or behind a LoadingScreen when large.

        Args:
            path: File to load.
            on_complete: Called with the Dataset once loaded.
            fatal: Exit the app when loading fails (nothing to show yet).
        """
        on_error = self._on_fatal_error if fatal else self._on_loading_error

        if self.should_load_async(path, self.settings.large_file_threshold):
            self._run_loading_task(path, on_complete=on_complete, on_error=on_error)
            return

        try:
            dataset = load_dataset(path)
        except DatasetLoadError as e:
            on_error(str(e))
            return
        on_complete(dataset)

    def _on_primary_loaded(self, dataset: Dataset) -> None:
        self.dataset = dataset
        self.title = f"datalens - {dataset.source_name}"
        self.push_screen(
            DatasetScreen(
                dataset,
                page_size=self.settings.effective_page_size,
                editable=self.settings.editable,
            )
        )
        self.notify(f"Loaded {len(dataset):,} rows from {dataset.source_name}")

        if self._compare_path:
            self._open(self._compare_path, self._on_compare_loaded)

    def _on_compare_loaded(self, dataset: Dataset) -> None:
        self.compare_dataset = dataset
        self.show_comparison()

    def _on_loading_error(self, error: str) -> None:
        self.notify(f"Error loading file: {error}", severity="error")

    def _on_fatal_error(self, error: str) -> None:
        self.exit(message=f"Error loading file: {error}")

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------

    def show_comparison(self) -> None:
        """Push the comparison screen for the current primary snapshot."""
        if self.dataset is None or self.compare_dataset is None:
            return
        self.push_screen(
            ComparisonScreen(
                self.dataset,
                self.compare_dataset,
                page_size=self.settings.effective_page_size,
            )
        )

    def on_dataset_screen_dataset_changed(
        self, message: DatasetScreen.DatasetChanged
    ) -> None:
        """Keep the app's reference on the latest edited snapshot."""
        self.dataset = message.dataset
        logger.debug("Primary dataset now has %d rows", len(message.dataset))

    def on_dataset_screen_compare_requested(
        self, message: DatasetScreen.CompareRequested
    ) -> None:
        if self.compare_dataset is not None:
            self.show_comparison()
            return
        self.push_screen(PathPromptModal(), self._on_compare_path_entered)

    def _on_compare_path_entered(self, path: str | None) -> None:
        if not path:
            return
        self._compare_path = path
        self._open(path, self._on_compare_loaded)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="datalens",
        description="Explore, edit and compare tabular datasets in a terminal UI. "
        "Supports CSV, TSV, JSON, JSONL and Parquet files.",
    )
    parser.add_argument("path", help="Path to the dataset to open")
    parser.add_argument(
        "--compare",
        "-c",
        dest="compare_path",
        default=None,
        help="Path to a second dataset to compare against",
    )
    parser.add_argument(
        "-O",
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for exports (default: {DEFAULT_OUTPUT_DIR})",
    )
    paging = parser.add_mutually_exclusive_group()
    paging.add_argument(
        "--page-size",
        type=int,
        default=DEFAULT_PAGE_SIZE,
        help=f"Rows per page (default: {DEFAULT_PAGE_SIZE})",
    )
    paging.add_argument(
        "--no-paginate",
        action="store_true",
        help="Show every row on a single page",
    )
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Disable cell editing and row add/delete",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for the Textual devtools console (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    for label, path in (("Path", args.path), ("Compare path", args.compare_path)):
        if path is None:
            continue
        if not os.path.exists(path):
            print(f"Error: {label} not found: {path}", file=sys.stderr)
            sys.exit(1)
        if not os.access(path, os.R_OK):
            print(f"Error: {label} permission denied: {path}", file=sys.stderr)
            sys.exit(1)

    try:
        settings = Settings.from_args(args)
    except ValueError as e:
        parser.error(str(e))

    configure_logging(settings.log_level)

    app = DatalensApp(path=args.path, compare_path=args.compare_path, settings=settings)
    app.run()


if __name__ == "__main__":
    main()
