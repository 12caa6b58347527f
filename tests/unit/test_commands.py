"""Tests for command construction and categories."""

from __future__ import annotations

import pytest

from lazydata.core.commands import Command, CommandCategory, CommandKind, CursorMove
from lazydata.core.vim import EditorMode, VimMode


class TestCommandCategories:
    def test_categories_follow_kind_prefix(self):
        assert CommandKind.QUIT.category is CommandCategory.GLOBAL
        assert CommandKind.KEY_MAP_SCROLL_UP.category is CommandCategory.GLOBAL
        assert CommandKind.TABLE_NEXT_ROW.category is CommandCategory.TABLE
        assert CommandKind.SIDEBAR_DESELECT.category is CommandCategory.SIDEBAR
        assert CommandKind.EDITOR_UNDO.category is CommandCategory.EDITOR

    def test_command_exposes_category(self):
        assert Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.UP).category is CommandCategory.EDITOR


class TestCommandPayloads:
    def test_payload_type_is_checked(self):
        with pytest.raises(TypeError):
            Command(CommandKind.TABLE_SET_TAB_INDEX, "1")

    def test_payload_rejected_for_plain_commands(self):
        with pytest.raises(ValueError):
            Command(CommandKind.QUIT, 1)

    def test_commands_are_value_objects(self):
        assert Command(CommandKind.TABLE_SET_TAB_INDEX, 2) == Command(CommandKind.TABLE_SET_TAB_INDEX, 2)
        assert repr(Command(CommandKind.QUIT)) == "Command(QUIT)"


class TestEditorMode:
    def test_operator_mode_requires_operator(self):
        with pytest.raises(ValueError):
            EditorMode(VimMode.OPERATOR)
        with pytest.raises(ValueError):
            EditorMode(VimMode.OPERATOR, "x")

    def test_labels(self):
        assert EditorMode.normal().label == "NORMAL"
        assert EditorMode.pending("d").label == "OPERATOR(d)"
