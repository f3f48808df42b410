"""
Background Task Mixin for loading datasets with progress feedback.

Provides a reusable pattern for:
- Pushing a LoadingScreen
- Loading a Dataset in a background thread
- Updating progress from the background thread
- Handling completion and errors
- Dismissing the progress screen
"""

from __future__ import annotations

import logging
import os
import time
from typing import TYPE_CHECKING, Callable

from textual import work

from datalens.config import LARGE_FILE_THRESHOLD
from datalens.engine.dataset import Dataset
from datalens.errors import DatasetLoadError
from datalens.tui import data_loader

if TYPE_CHECKING:
    from datalens.tui.screens.progress import LoadingScreen

logger = logging.getLogger(__name__)


class BackgroundTaskMixin:
    """Mixin providing background dataset loading with progress UI.

    Usage:
        class MyApp(BackgroundTaskMixin, App):
            def open(self, path):
                if self.should_load_async(path):
                    self._run_loading_task(
                        path,
                        on_complete=self._show_dataset,
                        on_error=self._show_error,
                    )
    """

    # Configurable delays
    TASK_COMPLETION_DELAY: float = 0.5
    TASK_ERROR_DELAY: float = 2.0

    # Default size threshold for async loading (100 MB)
    LARGE_FILE_THRESHOLD: int = LARGE_FILE_THRESHOLD

    def _run_loading_task(
        self,
        filename: str,
        on_complete: Callable[[Dataset], None],
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        """Load ``filename`` behind a LoadingScreen.

        Args:
            filename: Path of the file to load.
            on_complete: Called on the UI thread with the Dataset.
            on_error: Called on the UI thread with the error message.
        """
        from datalens.tui.screens.progress import LoadingScreen

        screen = LoadingScreen(filename=os.path.basename(filename))
        self.app.push_screen(screen)
        self._run_loading_worker(screen, filename, on_complete, on_error)

    @work(thread=True)
    def _run_loading_worker(
        self,
        screen: "LoadingScreen",
        filename: str,
        on_complete: Callable[[Dataset], None],
        on_error: Callable[[str], None] | None,
    ) -> None:
        """Background worker for loading tasks."""
        self.app.call_from_thread(screen.update_status, "Counting rows...")
        total = data_loader.get_record_count(filename)

        def progress(loaded: int, _total: int | None) -> None:
            self.app.call_from_thread(screen.update_loaded_count, loaded, total)

        try:
            dataset = data_loader.load_dataset(filename, progress_callback=progress)
        except DatasetLoadError as e:
            error_msg = str(e)
            logger.warning("Loading %s failed: %s", filename, error_msg)
            self.app.call_from_thread(screen.set_error, f"Error: {error_msg}")
            time.sleep(self.TASK_ERROR_DELAY)
            self.app.call_from_thread(self.app.pop_screen)
            if on_error:
                self.app.call_from_thread(on_error, error_msg)
            return

        self.app.call_from_thread(
            screen.set_complete, f"Loaded {len(dataset):,} rows"
        )
        time.sleep(self.TASK_COMPLETION_DELAY)
        self.app.call_from_thread(self.app.pop_screen)
        self.app.call_from_thread(on_complete, dataset)

    def should_load_async(self, file_path: str, threshold: int | None = None) -> bool:
        """Check if a file should be loaded asynchronously based on size.

        Args:
            file_path: Path to the file.
            threshold: Size threshold in bytes. Uses LARGE_FILE_THRESHOLD if None.
        """
        if threshold is None:
            threshold = self.LARGE_FILE_THRESHOLD
        return data_loader.should_load_async(file_path, threshold)
