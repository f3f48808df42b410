"""TUI views for the datalens viewer."""

from datalens.tui.views.comparison_screen import ComparisonScreen
from datalens.tui.views.dataset_screen import DatasetScreen

__all__ = ["ComparisonScreen", "DatasetScreen"]
