"""TUI widgets for the datalens viewer."""

from datalens.tui.widgets.path_prompt_modal import PathPromptModal
from datalens.tui.widgets.row_diff_modal import (
    RowDiffModal,
    format_difference,
    format_side,
)
from datalens.tui.widgets.stats_bar import StatsBar, describe_view

__all__ = [
    # Status footer
    "StatsBar",
    "describe_view",
    # Row difference modal
    "RowDiffModal",
    "format_difference",
    "format_side",
    # Path prompt
    "PathPromptModal",
]
