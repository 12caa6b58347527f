"""Tests for the paginated result table model."""

from __future__ import annotations

import json

import pytest

from lazydata.core.commands import Command, CommandKind
from lazydata.domains.results.app.table_model import (
    DATA_TAB,
    HISTORY_TAB,
    MESSAGES_TAB,
    PALETTES,
    LoadingKind,
    ResultTableModel,
    calculate_column_widths,
)
from lazydata.domains.results.domain.cells import coerce_row

from tests.helpers import FailingClipboard, MemoryClipboard, make_history_entry, make_rows, make_table_model


class TestLoading:
    def test_finish_loading_resets_view_state(self):
        model = make_table_model()
        assert model.row_count == 2
        assert model.selected_row == 0
        assert model.selected_column == 1
        assert model.current_page == 0
        assert model.loading_state.kind is LoadingKind.IDLE
        assert model.tabs.index == DATA_TAB

    def test_start_loading_switches_to_data_tab(self):
        model = make_table_model()
        model.tabs.set_index(HISTORY_TAB)
        model.start_loading()
        assert model.is_loading
        assert model.tabs.index == DATA_TAB

    def test_empty_result_shows_messages_tab(self):
        model = ResultTableModel()
        model.finish_loading([], [], 4, "INSERT 1 rows affected.")
        assert model.tabs.index == MESSAGES_TAB
        assert model.message == "INSERT 1 rows affected."
        assert model.selected_row is None

    def test_error_state(self):
        model = make_table_model()
        model.set_error_state("syntax error")
        assert model.loading_state.kind is LoadingKind.ERROR
        assert model.status_message == "Error: syntax error"
        assert model.tabs.index == MESSAGES_TAB


class TestColumnWidths:
    def test_widths_use_widest_value_plus_padding(self):
        rows = [coerce_row((1, "Alexandra")), coerce_row((22, None))]
        assert calculate_column_widths(["id", "name"], rows) == [4, 11]

    def test_minimum_width(self):
        assert calculate_column_widths(["a"], []) == [3]

    def test_widen_and_narrow_never_below_baseline(self):
        model = make_table_model()
        baseline = model.column_widths[0]
        model.handle_command(Command(CommandKind.TABLE_NARROW_COLUMN))
        assert model.column_widths[0] == baseline
        model.handle_command(Command(CommandKind.TABLE_WIDEN_COLUMN))
        model.handle_command(Command(CommandKind.TABLE_WIDEN_COLUMN))
        assert model.column_widths[0] == baseline + 2


class TestRowNavigation:
    def test_next_row_wraps_within_page(self):
        model = make_table_model()
        model.next_row()
        assert model.selected_row == 1
        model.next_row()
        assert model.selected_row == 0

    def test_previous_row_wraps_to_last(self):
        model = make_table_model()
        model.previous_row()
        assert model.selected_row == 1

    def test_navigation_on_empty_model_is_noop(self):
        model = ResultTableModel()
        model.next_row()
        model.next_column()
        model.next_page()
        assert model.selected_row is None
        assert model.selected_column is None
        assert model.current_page == 0


class TestPagination:
    def test_pages_are_clamped(self):
        model = make_table_model(("a", "b"), make_rows(250), page_size=100)
        assert model.total_pages == 3
        model.next_page()
        model.next_page()
        model.next_page()
        assert model.current_page == 2
        assert len(model.page_rows()) == 50
        model.previous_page()
        model.previous_page()
        model.previous_page()
        assert model.current_page == 0

    def test_jump_to_last_row(self):
        model = make_table_model(("a", "b"), make_rows(250), page_size=100)
        model.jump_to_last_row()
        assert model.current_page == 2
        assert model.selected_row == 49
        assert model.selected_absolute_row() == 249
        model.jump_to_first_row()
        assert (model.current_page, model.selected_row) == (0, 0)

    def test_jump_to_middle_row(self):
        model = make_table_model(("a", "b"), make_rows(250), page_size=100)
        model.jump_to_absolute_row(150)
        assert (model.current_page, model.selected_row) == (1, 50)
        assert model.selected_absolute_row() == 150
        model.jump_to_absolute_row(150)
        assert (model.current_page, model.selected_row) == (1, 50)

    @pytest.mark.parametrize(("target", "expected"), [(-5, 0), (99, 99), (100, 100), (1000, 249)])
    def test_jump_clamps_to_row_count(self, target, expected):
        model = make_table_model(("a", "b"), make_rows(250), page_size=100)
        model.jump_to_absolute_row(target)
        assert model.selected_absolute_row() == expected
        assert model.current_page == expected // 100
        assert model.selected_row == expected % 100

    def test_info_line(self):
        model = make_table_model(("a", "b"), make_rows(150), page_size=100)
        assert model.info_line() == "Total Rows: 150 | Query Complete: 5 ms | Page: 1/2"


class TestColumnNavigation:
    def test_column_bounds(self):
        model = make_table_model()
        model.next_column()
        model.next_column()
        model.next_column()
        assert model.selected_column == 2
        for _ in range(4):
            model.previous_column()
        assert model.selected_column == 0

    def test_scroll_right_clamps_selection(self):
        model = make_table_model(("a", "b", "c"), [(1, 2, 3)])
        model.selected_column = 3
        model.scroll_right()
        assert model.horizontal_scroll == 1
        assert model.selected_column == 2
        assert model.selected_cell_text() == "3"
        model.scroll_right()
        model.scroll_right()
        assert model.horizontal_scroll == 2
        model.scroll_left()
        assert model.horizontal_scroll == 1


class TestTabsAndColors:
    def test_set_tab_index_out_of_range_is_ignored(self):
        model = make_table_model()
        model.handle_command(Command(CommandKind.TABLE_SET_TAB_INDEX, 5))
        assert model.tabs.index == DATA_TAB
        model.handle_command(Command(CommandKind.TABLE_SET_TAB_INDEX, 2))
        assert model.tabs.index == HISTORY_TAB

    def test_tab_cycling(self):
        model = make_table_model()
        model.handle_command(Command(CommandKind.TABLE_PREVIOUS_TAB))
        assert model.tabs.index == HISTORY_TAB
        model.handle_command(Command(CommandKind.TABLE_NEXT_TAB))
        assert model.tabs.index == DATA_TAB

    def test_colors_cycle(self):
        model = make_table_model()
        model.previous_color()
        assert model.palette is PALETTES[-1]
        model.next_color()
        assert model.palette is PALETTES[0]


class TestClipboard:
    def test_copy_selected_cell(self):
        clipboard = MemoryClipboard()
        model = make_table_model(clipboard=clipboard)
        assert model.copy_selected_cell() == "1"
        assert clipboard.text == "1"
        assert model.status_message == "Copied: 1"

    def test_row_number_column_copies_absolute_row(self):
        model = make_table_model(clipboard=MemoryClipboard())
        model.selected_column = 0
        model.next_row()
        assert model.copy_selected_cell() == "2"

    def test_copy_cell_honours_horizontal_scroll(self):
        clipboard = MemoryClipboard()
        model = make_table_model(("a", "b", "c", "d"), make_rows(250, 4), clipboard=clipboard)
        model.jump_to_absolute_row(5)
        model.scroll_right()
        model.selected_column = 2
        assert model.selected_data_column() == 2
        assert model.copy_selected_cell() == "r5c2"
        assert clipboard.text == "r5c2"

    def test_copy_cell_on_later_page(self):
        model = make_table_model(("a", "b", "c", "d"), make_rows(250, 4), clipboard=MemoryClipboard())
        model.jump_to_absolute_row(150)
        model.selected_column = 3
        assert model.copy_selected_cell() == "r150c2"
        model.selected_column = 0
        assert model.copy_selected_cell() == "151"

    def test_copy_row_as_json_maps_null_to_none(self):
        clipboard = MemoryClipboard()
        model = make_table_model(("id", "email"), [(1, None)], clipboard=clipboard)
        text = model.copy_selected_row()
        assert json.loads(text) == {"id": "1", "email": None}
        assert clipboard.text == text

    def test_clipboard_failure_leaves_status_untouched(self):
        model = make_table_model(clipboard=FailingClipboard())
        before = model.status_message
        assert model.copy_selected_cell() == "1"
        assert model.status_message == before


class TestHistory:
    def test_history_rows_newest_first(self):
        model = ResultTableModel()
        model.set_history([make_history_entry("SELECT 1"), make_history_entry("SELECT 2", success=False)])
        rows = model.history_rows_text()
        assert [r[0] for r in rows] == ["SELECT 2", "SELECT 1"]
        assert rows[0][2] == "Error"
        assert rows[1][1] == "2024-01-01 12:00:00"

    def test_history_selection_wraps(self):
        model = ResultTableModel()
        model.set_history([make_history_entry("a"), make_history_entry("b")])
        model.next_history_row()
        assert model.get_selected_history_query() == "b"
        model.next_history_row()
        assert model.get_selected_history_query() == "a"
        model.next_history_row()
        assert model.get_selected_history_query() == "b"

    def test_empty_history_navigation_is_noop(self):
        model = ResultTableModel()
        model.next_history_row()
        model.previous_history_row()
        assert model.history_selected is None
        assert model.get_selected_history_query() is None
