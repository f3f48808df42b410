"""Reusable screen components for the TUI application."""

from datalens.tui.screens.progress import (
    ExportingScreen,
    LoadingScreen,
    ProgressScreen,
)

__all__ = [
    "ProgressScreen",
    "LoadingScreen",
    "ExportingScreen",
]
