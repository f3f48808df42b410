"""Tests for the ViewEngine search, sort, pagination, selection and edit model."""

from __future__ import annotations

import pytest

from datalens.engine import (
    WHOLE_ROW,
    SortDirection,
    SortSpec,
    ViewEngine,
    compare_values,
    page_count,
)
from datalens.engine.view import export_view
from datalens.errors import EditInProgressError, NotEditableError


def visible_ids(view: ViewEngine) -> list:
    return [row.get("id") for row in view.visible_rows]


class TestSearch:
    """Tests for the case-insensitive substring filter."""

    def test_empty_term_keeps_everything_in_order(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        assert visible_ids(view) == [1, 2, 3, 4, 5]

    def test_search_is_case_insensitive(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.set_search_term("NORTH")
        assert visible_ids(view) == [1, 4]

    def test_search_matches_numbers_by_text(self, sales_dataset):
        """Numbers are searched through their canonical text."""
        view = ViewEngine(sales_dataset)
        view.set_search_term("80.5")
        assert visible_ids(view) == [2]

    def test_search_with_no_matches(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.set_search_term("zzz")
        assert view.visible_rows == ()
        assert view.page_count == 1

    def test_longer_term_never_adds_rows(self, sales_dataset):
        """Extending the term can only narrow the result."""
        view = ViewEngine(sales_dataset)
        view.set_search_term("n")
        broad = {row.original_index for row in view.visible_rows}
        view.set_search_term("no")
        narrow = {row.original_index for row in view.visible_rows}
        assert narrow <= broad

    def test_search_resets_page_and_selection(self, sales_dataset):
        view = ViewEngine(sales_dataset, page_size=2)
        view.set_page(3)
        view.select_row(0)
        view.set_search_term("o")
        assert view.page == 1
        assert view.selection is None

    def test_original_indices_survive_filtering(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.set_search_term("west")
        assert [row.original_index for row in view.visible_rows] == [4]


class TestSort:
    """Tests for sorting the visible sequence."""

    def test_numeric_ascending_nulls_last(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.sort_by("revenue")
        assert visible_ids(view) == [5, 2, 1, 4, 3]

    def test_numeric_descending_nulls_still_last(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.sort_by("revenue")
        spec = view.sort_by("revenue")
        assert spec.direction is SortDirection.DESCENDING
        assert visible_ids(view) == [4, 1, 2, 5, 3]

    def test_text_sort_is_case_insensitive_and_stable(self, sales_dataset):
        """"North" and "north" compare equal and keep their storage order."""
        view = ViewEngine(sales_dataset)
        view.sort_by("region")
        assert visible_ids(view) == [3, 1, 4, 2, 5]

    def test_empty_text_is_not_null(self, sales_dataset):
        """The empty string sorts first, unlike null."""
        view = ViewEngine(sales_dataset)
        view.sort_by("note")
        assert visible_ids(view) == [2, 3, 5, 1, 4]

    def test_new_key_starts_ascending(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.sort_by("revenue")
        view.sort_by("revenue")
        assert view.sort_by("id") == SortSpec("id")

    def test_sorting_twice_in_same_direction_is_idempotent(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.set_sort(SortSpec("region"))
        first = view.visible_rows
        view.set_sort(SortSpec("region", SortDirection.ASCENDING))
        assert view.visible_rows == first

    def test_sort_applies_after_filter(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.set_search_term("north")
        view.sort_by("revenue")
        view.sort_by("revenue")
        assert visible_ids(view) == [4, 1]


class TestCompareValues:
    def test_nulls_last_in_both_directions(self):
        assert compare_values(None, 1) == 1
        assert compare_values(None, 1, ascending=False) == 1
        assert compare_values("a", None, ascending=False) == -1
        assert compare_values(None, None) == 0

    def test_numbers_compare_numerically(self):
        assert compare_values(9, 10) == -1

    def test_mixed_types_compare_as_text(self):
        """10 vs "9" falls back to text, where "10" < "9"."""
        assert compare_values(10, "9") == -1


class TestPagination:
    def test_page_count(self):
        assert page_count(0, 15) == 1
        assert page_count(15, 15) == 1
        assert page_count(16, 15) == 2
        assert page_count(100, None) == 1

    def test_page_rows(self, sales_dataset):
        view = ViewEngine(sales_dataset, page_size=2)
        assert view.page_count == 3
        assert [r.get("id") for r in view.page_rows] == [1, 2]
        view.next_page()
        assert [r.get("id") for r in view.page_rows] == [3, 4]
        assert view.page_offset == 2
        view.next_page()
        assert [r.get("id") for r in view.page_rows] == [5]

    def test_page_is_clamped(self, sales_dataset):
        view = ViewEngine(sales_dataset, page_size=2)
        assert view.set_page(10) == 3
        assert view.set_page(0) == 1
        assert view.previous_page() == 1

    def test_unpaginated_view_shows_everything(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        assert len(view.page_rows) == 5
        assert view.page_offset == 0


class TestSelection:
    """Tests for drag selection and whole row/column selection."""

    def test_drag_selects_rectangle(self, grid_dataset):
        view = ViewEngine(grid_dataset)
        view.press(0, 0)
        assert view.is_dragging
        view.enter(1, 1)
        view.release()
        assert not view.is_dragging
        assert sorted(view.selected_values()) == [1, 2, 4, 5]

    def test_enter_without_drag_is_ignored(self, grid_dataset):
        view = ViewEngine(grid_dataset)
        view.press(0, 0)
        view.release()
        view.enter(2, 1)
        assert list(view.selected_values()) == [1]

    def test_corners_in_any_order(self, grid_dataset):
        view = ViewEngine(grid_dataset)
        view.press(2, 1)
        view.enter(1, 0)
        assert view.is_selected(1, 0)
        assert view.is_selected(2, 1)
        assert not view.is_selected(0, 0)

    def test_extend_keeps_anchor(self, grid_dataset):
        view = ViewEngine(grid_dataset)
        view.press(0, 0)
        view.release()
        view.press(2, 0, extend=True)
        assert list(view.selected_values()) == [1, 2, 3]

    def test_select_row_covers_every_column(self, grid_dataset):
        view = ViewEngine(grid_dataset)
        view.select_row(1)
        assert view.selection.start.col_index == WHOLE_ROW
        assert view.is_selected(1, 0) and view.is_selected(1, 1)
        assert list(view.selected_values()) == [2, 5]

    def test_select_column(self, grid_dataset):
        view = ViewEngine(grid_dataset)
        view.select_column(1)
        assert list(view.selected_values()) == [4, 5, 6]

    def test_selection_uses_visible_coordinates(self, grid_dataset):
        """Row coordinates follow the sorted order, not storage order."""
        view = ViewEngine(grid_dataset)
        view.set_sort(SortSpec("a", SortDirection.DESCENDING))
        view.select_row(0)
        assert list(view.selected_values()) == [3, 6]

    def test_selection_is_clipped_to_grid(self, grid_dataset):
        view = ViewEngine(grid_dataset)
        view.press(1, 1)
        view.enter(10, 10)
        assert sorted(view.selected_values()) == [5, 6]

    def test_no_selection_has_no_stats(self, grid_dataset):
        assert ViewEngine(grid_dataset).selection_stats() is None

    def test_whole_grid_stats(self, grid_dataset):
        view = ViewEngine(grid_dataset)
        view.press(0, 0)
        view.enter(2, 1)
        stats = view.selection_stats()
        assert stats.cell_count == 6
        assert stats.sum == 21
        assert stats.mean == 3.5
        assert stats.median == 3.5
        assert stats.min == 1
        assert stats.max == 6

    def test_sort_clears_selection(self, grid_dataset):
        view = ViewEngine(grid_dataset)
        view.select_row(0)
        view.sort_by("a")
        assert view.selection is None


class TestEditing:
    """Tests for the begin/update/commit edit protocol."""

    def test_commit_parses_number(self, editable_view, sales_dataset):
        state = editable_view.begin_edit(0, "revenue")
        assert state.staged_text == "120"
        editable_view.update_edit_text("12.0")
        updated = editable_view.commit_edit()
        assert updated.row_at(0)["revenue"] == 12
        assert editable_view.dataset is updated
        assert sales_dataset.row_at(0)["revenue"] == 120

    def test_commit_keeps_trailing_dot_as_text(self, editable_view):
        editable_view.begin_edit(0, "revenue")
        editable_view.update_edit_text("12.")
        assert editable_view.commit_edit().row_at(0)["revenue"] == "12."

    def test_null_stages_as_empty_text(self, editable_view):
        assert editable_view.begin_edit(2, "revenue").staged_text == ""

    def test_begin_edit_clears_selection(self, editable_view):
        editable_view.select_row(0)
        editable_view.begin_edit(0, "note")
        assert editable_view.selection is None
        assert editable_view.is_editing_cell(0, "note")

    def test_second_edit_is_rejected(self, editable_view):
        editable_view.begin_edit(0, "note")
        with pytest.raises(EditInProgressError):
            editable_view.begin_edit(1, "note")

    def test_read_only_view_rejects_edits(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        with pytest.raises(NotEditableError):
            view.begin_edit(0, "note")
        with pytest.raises(NotEditableError):
            view.add_row()
        with pytest.raises(NotEditableError):
            view.delete_row(0)

    def test_out_of_range_edit_returns_none(self, editable_view):
        assert editable_view.begin_edit(99, "note") is None
        assert editable_view.begin_edit(0, "missing-column") is None
        assert not editable_view.is_editing

    def test_commit_without_edit_returns_none(self, editable_view):
        assert editable_view.commit_edit() is None

    def test_cancel_discards_staged_text(self, editable_view, sales_dataset):
        editable_view.begin_edit(0, "note")
        editable_view.update_edit_text("changed")
        editable_view.cancel_edit()
        assert not editable_view.is_editing
        assert editable_view.dataset is sales_dataset

    def test_edit_addresses_row_by_original_index(self, editable_view):
        """Under a sort, visible row 0 is the row with the smallest revenue."""
        editable_view.sort_by("revenue")
        state = editable_view.begin_edit(0, "note")
        assert state.original_index == 4
        editable_view.update_edit_text("edited")
        assert editable_view.commit_edit().row_at(4)["note"] == "edited"


class TestPositionOf:
    def test_tracks_rows_through_sort_and_filter(self, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.sort_by("revenue")
        assert view.position_of(4) == 0
        assert view.position_of(2) == 4

        view.set_search_term("north")
        assert view.position_of(3) == 1
        assert view.position_of(4) is None

    def test_unknown_index(self, sales_dataset):
        assert ViewEngine(sales_dataset).position_of(99) is None


class TestRowLifecycle:
    def test_add_row_appends_empty_row(self, editable_view):
        updated = editable_view.add_row()
        assert len(updated) == 6
        assert updated.row_at(5) == {"id": "", "region": "", "revenue": "", "note": ""}
        assert editable_view.visible_count == 6

    def test_delete_row_by_original_index(self, editable_view):
        updated = editable_view.delete_row(2)
        assert [r.original_index for r in editable_view.visible_rows] == [0, 1, 3, 4]
        assert updated.row_at(2) is None

    def test_delete_unknown_row_is_noop(self, editable_view, sales_dataset):
        assert editable_view.delete_row(99) is sales_dataset

    def test_delete_drops_out_of_bounds_selection(self, editable_view):
        editable_view.select_row(4)
        editable_view.delete_row(0)
        assert editable_view.selection is None

    def test_delete_keeps_in_bounds_selection(self, editable_view):
        editable_view.select_row(0)
        editable_view.delete_row(4)
        assert editable_view.selection is not None

    def test_delete_clamps_page(self, sales_dataset):
        view = ViewEngine(sales_dataset, page_size=2, editable=True)
        view.set_page(3)
        view.delete_row(4)
        assert view.page == 2

    def test_delete_closes_edit_on_that_row(self, editable_view):
        editable_view.begin_edit(1, "note")
        editable_view.delete_row(1)
        assert not editable_view.is_editing


class TestSetDataset:
    def test_external_snapshot_resets_state(self, editable_view, sales_dataset):
        editable_view.select_row(0)
        editable_view.begin_edit(1, "note")
        editable_view.set_dataset(sales_dataset.with_cell(0, "note", "new"))
        assert editable_view.selection is None
        assert not editable_view.is_editing
        assert editable_view.row_at(0).get("note") == "new"


def test_export_view_strips_indices(sales_dataset):
    view = ViewEngine(sales_dataset)
    view.set_search_term("west")
    assert export_view(view.visible_rows) == [
        {"id": 5, "region": "West", "revenue": 7, "note": "n/a"}
    ]
