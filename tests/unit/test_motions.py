"""Tests for editor motions."""

from __future__ import annotations

import pytest

from lazydata.domains.query.editing.motions import (
    Position,
    char_class,
    motion_bottom,
    motion_down,
    motion_line_end,
    motion_top,
    motion_up,
    motion_word_back,
    motion_word_end,
    motion_word_forward,
)

LINE = ["SELECT * FROM t"]


@pytest.mark.parametrize(
    "ch,expected",
    [(" ", 0), ("", 0), ("a", 1), ("_", 1), ("9", 1), ("*", 2), ("(", 2)],
)
def test_char_class(ch, expected):
    assert char_class(ch) == expected


class TestWordForward:
    def test_skips_word_and_blanks(self):
        assert motion_word_forward(LINE, 0, 0).position == Position(0, 7)
        assert motion_word_forward(LINE, 0, 7).position == Position(0, 9)

    def test_last_word_goes_to_line_end(self):
        assert motion_word_forward(LINE, 0, 14).position == Position(0, 15)

    def test_crosses_lines_skipping_indent(self):
        assert motion_word_forward(["foo", "  bar"], 0, 0).position == Position(1, 2)

    def test_stops_on_empty_line(self):
        assert motion_word_forward(["foo", "", "bar"], 0, 0).position == Position(1, 0)


class TestWordEnd:
    def test_end_of_current_word(self):
        result = motion_word_end(LINE, 0, 0)
        assert result.position == Position(0, 5)
        assert result.inclusive

    def test_end_of_next_word(self):
        assert motion_word_end(LINE, 0, 5).position == Position(0, 7)


class TestWordBack:
    def test_previous_word_start(self):
        assert motion_word_back(LINE, 0, 9).position == Position(0, 7)
        assert motion_word_back(LINE, 0, 4).position == Position(0, 0)

    def test_at_buffer_start(self):
        assert motion_word_back(LINE, 0, 0).position == Position(0, 0)


class TestLineMotions:
    def test_line_end_is_exclusive(self):
        assert motion_line_end(LINE, 0, 0).position == Position(0, 15)

    def test_vertical_motions_clamp_column_and_are_linewise(self):
        lines = ["long line", "ab"]
        down = motion_down(lines, 0, 8)
        assert down.position == Position(1, 2)
        assert down.linewise
        assert motion_up(lines, 0, 3).position == Position(0, 3)
        assert motion_down(lines, 1, 0).position == Position(1, 0)

    def test_top_and_bottom(self):
        lines = ["a", "b", "c"]
        assert motion_top(lines, 2, 0).position == Position(0, 0)
        assert motion_bottom(lines, 0, 0).position == Position(2, 0)
