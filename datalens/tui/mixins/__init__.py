"""Mixins for the TUI application."""

from datalens.tui.mixins.background_task import BackgroundTaskMixin
from datalens.tui.mixins.data_table import DataTableMixin
from datalens.tui.mixins.export import ExportMixin
from datalens.tui.mixins.grid_selection import GridSelectionMixin
from datalens.tui.mixins.vim_navigation import VimNavigationMixin

__all__ = [
    "BackgroundTaskMixin",
    "DataTableMixin",
    "ExportMixin",
    "GridSelectionMixin",
    "VimNavigationMixin",
]
