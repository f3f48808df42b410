"""
Vim Navigation Mixin for global vim-style keybindings.

Provides h/j/k/l/g/G navigation that works across screens by delegating
to the focused DataTable's native cursor actions.
"""

from __future__ import annotations

from textual.binding import Binding
from textual.widgets import DataTable


class VimNavigationMixin:
    """Mixin providing global vim-style navigation keybindings.

    This mixin adds vim keybindings that delegate to the focused table:
    - j/k: Move cursor down/up
    - h/l: Move cursor left/right
    - g: Jump to first row
    - G: Jump to last row

    Usage:
        class MyScreen(VimNavigationMixin, Screen):
            BINDINGS = VimNavigationMixin.VIM_BINDINGS + [...]
    """

    VIM_BINDINGS = [
        Binding("j", "vim_down", "Down", show=False),
        Binding("k", "vim_up", "Up", show=False),
        Binding("h", "vim_left", "Left", show=False),
        Binding("l", "vim_right", "Right", show=False),
        Binding("g", "vim_top", "Top", show=False),
        Binding("G", "vim_bottom", "Bottom", show=False),
    ]

    def _get_navigable_table(self) -> DataTable | None:
        """Get the focused widget if it is a DataTable."""
        focused = self.focused
        if isinstance(focused, DataTable):
            return focused
        return None

    def action_vim_down(self) -> None:
        table = self._get_navigable_table()
        if table is not None:
            table.action_cursor_down()

    def action_vim_up(self) -> None:
        table = self._get_navigable_table()
        if table is not None:
            table.action_cursor_up()

    def action_vim_left(self) -> None:
        table = self._get_navigable_table()
        if table is not None:
            table.action_cursor_left()

    def action_vim_right(self) -> None:
        table = self._get_navigable_table()
        if table is not None:
            table.action_cursor_right()

    def action_vim_top(self) -> None:
        """Jump to first row (vim g)."""
        table = self._get_navigable_table()
        if table is not None and table.row_count > 0:
            table.move_cursor(row=0)

    def action_vim_bottom(self) -> None:
        """Jump to last row (vim G)."""
        table = self._get_navigable_table()
        if table is not None and table.row_count > 0:
            table.move_cursor(row=table.row_count - 1)
