"""Closed set of user intents produced by the input resolver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from lazydata.core.vim import EditorMode


class CommandCategory(Enum):
    GLOBAL = "Global"
    EDITOR = "Editor"
    TABLE = "DataTable"
    SIDEBAR = "Sidebar"


class CursorMove(Enum):
    """Cursor motions understood by the editor."""

    FORWARD = "forward"
    BACK = "back"
    UP = "up"
    DOWN = "down"
    WORD_FORWARD = "word_forward"
    WORD_END = "word_end"
    WORD_BACK = "word_back"
    HEAD = "head"
    END = "end"
    TOP = "top"
    BOTTOM = "bottom"


class ScrollAmount(Enum):
    HALF_PAGE_DOWN = "half_page_down"
    HALF_PAGE_UP = "half_page_up"
    PAGE_DOWN = "page_down"
    PAGE_UP = "page_up"


@dataclass(frozen=True)
class PendingOperation:
    """Operator plus the motion that completes it (e.g. ``d`` + ``w``)."""

    operator: str
    motion: CursorMove


class CommandKind(Enum):
    # Global
    QUIT = "quit"
    TOGGLE_FOCUS = "toggle_focus"
    EXECUTE_QUERY = "execute_query"
    SHOW_KEY_MAP = "show_key_map"
    CLOSE_POPUP = "close_popup"
    KEY_MAP_SCROLL_UP = "key_map_scroll_up"
    KEY_MAP_SCROLL_DOWN = "key_map_scroll_down"
    NOOP = "noop"

    # Result table
    TABLE_PREVIOUS_TAB = "table_previous_tab"
    TABLE_NEXT_TAB = "table_next_tab"
    TABLE_NEXT_ROW = "table_next_row"
    TABLE_PREVIOUS_ROW = "table_previous_row"
    TABLE_NEXT_HISTORY_ROW = "table_next_history_row"
    TABLE_PREVIOUS_HISTORY_ROW = "table_previous_history_row"
    TABLE_SCROLL_RIGHT = "table_scroll_right"
    TABLE_SCROLL_LEFT = "table_scroll_left"
    TABLE_NEXT_COLOR = "table_next_color"
    TABLE_PREVIOUS_COLOR = "table_previous_color"
    TABLE_NEXT_PAGE = "table_next_page"
    TABLE_PREVIOUS_PAGE = "table_previous_page"
    TABLE_JUMP_TO_FIRST_ROW = "table_jump_to_first_row"
    TABLE_JUMP_TO_LAST_ROW = "table_jump_to_last_row"
    TABLE_NEXT_COLUMN = "table_next_column"
    TABLE_PREVIOUS_COLUMN = "table_previous_column"
    TABLE_WIDEN_COLUMN = "table_widen_column"
    TABLE_NARROW_COLUMN = "table_narrow_column"
    TABLE_COPY_SELECTED_CELL = "table_copy_selected_cell"
    TABLE_COPY_SELECTED_ROW = "table_copy_selected_row"
    TABLE_COPY_QUERY_TO_EDITOR = "table_copy_query_to_editor"
    TABLE_RUN_SELECTED_HISTORY_QUERY = "table_run_selected_history_query"
    TABLE_SET_TAB_INDEX = "table_set_tab_index"

    # Sidebar
    SIDEBAR_TOGGLE_SELECTED = "sidebar_toggle_selected"
    SIDEBAR_KEY_LEFT = "sidebar_key_left"
    SIDEBAR_KEY_RIGHT = "sidebar_key_right"
    SIDEBAR_KEY_DOWN = "sidebar_key_down"
    SIDEBAR_KEY_UP = "sidebar_key_up"
    SIDEBAR_DESELECT = "sidebar_deselect"
    SIDEBAR_SELECT_FIRST = "sidebar_select_first"
    SIDEBAR_SELECT_LAST = "sidebar_select_last"
    SIDEBAR_SCROLL_DOWN = "sidebar_scroll_down"
    SIDEBAR_SCROLL_UP = "sidebar_scroll_up"

    # Editor
    EDITOR_INPUT_CHAR = "editor_input_char"
    EDITOR_INPUT_BACKSPACE = "editor_input_backspace"
    EDITOR_INPUT_DELETE = "editor_input_delete"
    EDITOR_INPUT_ENTER = "editor_input_enter"
    EDITOR_MOVE_CURSOR = "editor_move_cursor"
    EDITOR_DELETE_LINE_BY_END = "editor_delete_line_by_end"
    EDITOR_CANCEL_SELECTION = "editor_cancel_selection"
    EDITOR_PASTE = "editor_paste"
    EDITOR_UNDO = "editor_undo"
    EDITOR_REDO = "editor_redo"
    EDITOR_DELETE_NEXT_CHAR = "editor_delete_next_char"
    EDITOR_OPEN_LINE = "editor_open_line"
    EDITOR_SET_MODE = "editor_set_mode"
    EDITOR_SCROLL_RELATIVE = "editor_scroll_relative"
    EDITOR_SCROLL = "editor_scroll"
    EDITOR_START_SELECTION = "editor_start_selection"
    EDITOR_COPY_SELECTION = "editor_copy_selection"
    EDITOR_CUT_SELECTION = "editor_cut_selection"
    EDITOR_OPERATE_LINE = "editor_operate_line"
    EDITOR_PERFORM_PENDING_OPERATOR = "editor_perform_pending_operator"

    @property
    def category(self) -> CommandCategory:
        prefix = self.value.split("_", 1)[0]
        return _CATEGORY_PREFIXES.get(prefix, CommandCategory.GLOBAL)


_CATEGORY_PREFIXES: dict[str, CommandCategory] = {
    "table": CommandCategory.TABLE,
    "sidebar": CommandCategory.SIDEBAR,
    "editor": CommandCategory.EDITOR,
}

# Kinds that require a payload, with the payload type they carry.
PAYLOAD_TYPES: dict[CommandKind, type | tuple[type, ...]] = {
    CommandKind.TABLE_SET_TAB_INDEX: int,
    CommandKind.SIDEBAR_SCROLL_DOWN: int,
    CommandKind.SIDEBAR_SCROLL_UP: int,
    CommandKind.EDITOR_INPUT_CHAR: str,
    CommandKind.EDITOR_MOVE_CURSOR: CursorMove,
    CommandKind.EDITOR_OPEN_LINE: bool,
    CommandKind.EDITOR_SET_MODE: EditorMode,
    CommandKind.EDITOR_SCROLL_RELATIVE: tuple,
    CommandKind.EDITOR_SCROLL: ScrollAmount,
    CommandKind.EDITOR_OPERATE_LINE: str,
    CommandKind.EDITOR_PERFORM_PENDING_OPERATOR: PendingOperation,
}


@dataclass(frozen=True)
class Command:
    """An immutable intent, produced once per key event and consumed once."""

    kind: CommandKind
    payload: Any = None

    def __post_init__(self) -> None:
        expected = PAYLOAD_TYPES.get(self.kind)
        if expected is None:
            if self.payload is not None:
                raise ValueError(f"{self.kind.name} takes no payload")
            return
        if not isinstance(self.payload, expected):
            raise TypeError(f"{self.kind.name} expects {expected}, got {type(self.payload).__name__}")

    @property
    def category(self) -> CommandCategory:
        return self.kind.category

    def __repr__(self) -> str:
        if self.payload is None:
            return f"Command({self.kind.name})"
        return f"Command({self.kind.name}, {self.payload!r})"


NOOP = Command(CommandKind.NOOP)
