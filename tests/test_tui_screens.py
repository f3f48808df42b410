"""Tests for the dataset and comparison screens, driven through Textual's pilot."""

from __future__ import annotations

import asyncio

from textual.app import App
from textual.widgets import Input

from datalens.engine import Dataset
from datalens.tui.views import ComparisonScreen, DatasetScreen
from datalens.tui.widgets import RowDiffModal


class ScreenHost(App):
    """Bare app that shows a single screen."""

    def __init__(self, screen) -> None:
        super().__init__()
        self._initial_screen = screen

    def on_mount(self) -> None:
        self.push_screen(self._initial_screen)


def run_with_screen(screen, scenario) -> None:
    """Mount ``screen`` in a headless app and run ``scenario(pilot, screen)``."""

    async def _run() -> None:
        app = ScreenHost(screen)
        async with app.run_test() as pilot:
            await pilot.pause()
            screen.table.focus()
            await pilot.pause()
            await scenario(pilot, screen)

    asyncio.run(_run())


def numbered_datasets(count: int) -> tuple[Dataset, Dataset]:
    left = Dataset.create(
        [{"id": i, "v": i} for i in range(count)], ["id", "v"], source_name="a.csv"
    )
    right = Dataset.create(
        [{"id": i, "v": i * 2} for i in range(count)], ["id", "v"], source_name="b.csv"
    )
    return left, right


class TestComparisonScreenPaging:
    """Every page of a comparison bucket is reachable."""

    def test_next_and_previous_page(self):
        left, right = numbered_datasets(40)
        screen = ComparisonScreen(left, right, page_size=15)

        async def scenario(pilot, screen):
            assert screen.engine.page_count == 3
            assert screen.table.row_count == 15

            await pilot.press("n", "n")
            assert screen.engine.page == 3
            assert screen.table.row_count == 10

            await pilot.press("n")
            assert screen.engine.page == 3

            await pilot.press("p")
            assert screen.engine.page == 2
            assert screen.table.row_count == 15

        run_with_screen(screen, scenario)

    def test_row_on_last_page_opens_diff(self):
        left, right = numbered_datasets(40)
        screen = ComparisonScreen(left, right, page_size=15)

        async def scenario(pilot, screen):
            await pilot.press("n", "n", "enter")
            await pilot.pause()
            modal = pilot.app.screen
            assert isinstance(modal, RowDiffModal)
            assert modal.key_value == 30

        run_with_screen(screen, scenario)

    def test_switching_bucket_starts_on_first_page(self):
        left, right = numbered_datasets(40)
        screen = ComparisonScreen(left, right, page_size=15)

        async def scenario(pilot, screen):
            await pilot.press("n", "2")
            assert screen.engine.page == 1
            assert screen.table.row_count == 0

        run_with_screen(screen, scenario)


class TestComparisonScreenSelection:
    def test_column_selection_feeds_stats(self):
        left, right = numbered_datasets(20)
        screen = ComparisonScreen(left, right, page_size=15)

        async def scenario(pilot, screen):
            await pilot.press("c")
            stats = screen.engine.selection_stats()
            assert stats.cell_count == 20
            assert stats.numeric_count == 20
            assert stats.sum == sum(range(20))

            await pilot.press("escape")
            assert screen.engine.selection is None
            assert pilot.app.screen is screen

        run_with_screen(screen, scenario)


class TestDatasetScreenEditing:
    def test_edit_target_survives_resort(self, sales_dataset):
        """Committing one edit and opening the next keeps the clicked row.

        Sorted by revenue: 7 (row 4), 80.5 (row 1), 120, 300, null. Raising
        row 4 to 1000 moves it behind 300, and row 1 becomes the first row.
        """
        screen = DatasetScreen(sales_dataset, page_size=None)
        revenue = sales_dataset.columns.index("revenue")

        async def scenario(pilot, screen):
            screen.engine.sort_by("revenue")
            screen._refresh_table()
            screen.table.move_cursor(row=0, column=revenue)
            screen.action_edit_cell()
            await pilot.pause()
            assert screen.engine.edit_state.original_index == 4

            screen.query_one("#edit-input", Input).value = "1000"
            await pilot.pause()

            screen.table.move_cursor(row=1, column=revenue)
            screen.action_edit_cell()
            await pilot.pause()

            assert screen.engine.dataset.row_at(4)["revenue"] == 1000
            assert screen.engine.edit_state.original_index == 1
            assert screen.table.cursor_coordinate.row == 0

        run_with_screen(screen, scenario)

    def test_added_row_gets_the_cursor(self, sales_dataset):
        screen = DatasetScreen(sales_dataset, page_size=2)

        async def scenario(pilot, screen):
            screen.action_add_row()
            await pilot.pause()
            assert screen.engine.page == 3
            row = screen.table.cursor_coordinate.row
            assert screen.engine.page_rows[row].original_index == 5

        run_with_screen(screen, scenario)
