"""Modal input resolution: key press + focus + resolver state -> Command.

The resolver owns the editor mode and the single pending keystroke. Both live
in an immutable ``ResolverState`` that ``resolve_key`` threads through each
call; ``ModalInputResolver`` is a thin holder for callers that want a mutable
object.

Pending keystrokes bound every compound sequence to two keys: a buffered
``g`` waits for a second ``g``, and a buffered operator waits for a motion or
for the same operator. The buffer never expires on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lazydata.core.commands import (
    NOOP,
    Command,
    CommandKind,
    CursorMove,
    PendingOperation,
    ScrollAmount,
)
from lazydata.core.input_context import Focus
from lazydata.core.keys import KeyKind, KeyPress
from lazydata.core.vim import OPERATORS, EditorMode, VimMode

HISTORY_TAB_INDEX = 2
SIDEBAR_SCROLL_STEP = 3

# Keys that move the cursor in Normal/Visual mode and complete a pending operator.
MOTION_KEYS: dict[str, CursorMove] = {
    "h": CursorMove.BACK,
    "left": CursorMove.BACK,
    "j": CursorMove.DOWN,
    "down": CursorMove.DOWN,
    "k": CursorMove.UP,
    "up": CursorMove.UP,
    "l": CursorMove.FORWARD,
    "right": CursorMove.FORWARD,
    "w": CursorMove.WORD_FORWARD,
    "e": CursorMove.WORD_END,
    "b": CursorMove.WORD_BACK,
    "0": CursorMove.HEAD,
    "^": CursorMove.HEAD,
    "$": CursorMove.END,
    "G": CursorMove.BOTTOM,
}

GLOBAL_KEYS: dict[str, CommandKind] = {
    "ctrl+q": CommandKind.QUIT,
    "tab": CommandKind.TOGGLE_FOCUS,
    "f5": CommandKind.EXECUTE_QUERY,
}

# Printable globals; typed as text while the editor is in Insert mode.
PRINTABLE_GLOBAL_KEYS: dict[str, CommandKind] = {
    "q": CommandKind.QUIT,
    "?": CommandKind.SHOW_KEY_MAP,
}

OVERLAY_KEYS: dict[str, CommandKind] = {
    "q": CommandKind.CLOSE_POPUP,
    "escape": CommandKind.CLOSE_POPUP,
    "?": CommandKind.CLOSE_POPUP,
    "k": CommandKind.KEY_MAP_SCROLL_UP,
    "up": CommandKind.KEY_MAP_SCROLL_UP,
    "j": CommandKind.KEY_MAP_SCROLL_DOWN,
    "down": CommandKind.KEY_MAP_SCROLL_DOWN,
}

_NORMAL_SIMPLE: dict[str, Command] = {
    "home": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.HEAD),
    "end": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.END),
    "D": Command(CommandKind.EDITOR_DELETE_LINE_BY_END),
    "p": Command(CommandKind.EDITOR_PASTE),
    "u": Command(CommandKind.EDITOR_UNDO),
    "ctrl+r": Command(CommandKind.EDITOR_REDO),
    "x": Command(CommandKind.EDITOR_DELETE_NEXT_CHAR),
    "ctrl+e": Command(CommandKind.EDITOR_SCROLL_RELATIVE, (1, 0)),
    "ctrl+y": Command(CommandKind.EDITOR_SCROLL_RELATIVE, (-1, 0)),
    "ctrl+d": Command(CommandKind.EDITOR_SCROLL, ScrollAmount.HALF_PAGE_DOWN),
    "ctrl+u": Command(CommandKind.EDITOR_SCROLL, ScrollAmount.HALF_PAGE_UP),
    "ctrl+f": Command(CommandKind.EDITOR_SCROLL, ScrollAmount.PAGE_DOWN),
    "ctrl+b": Command(CommandKind.EDITOR_SCROLL, ScrollAmount.PAGE_UP),
    "pagedown": Command(CommandKind.EDITOR_SCROLL, ScrollAmount.PAGE_DOWN),
    "pageup": Command(CommandKind.EDITOR_SCROLL, ScrollAmount.PAGE_UP),
}

# Normal-mode keys that enter Insert mode, with the command they emit.
_NORMAL_TO_INSERT: dict[str, Command] = {
    "i": Command(CommandKind.EDITOR_SET_MODE, EditorMode.insert()),
    "a": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.FORWARD),
    "A": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.END),
    "I": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.HEAD),
    "o": Command(CommandKind.EDITOR_OPEN_LINE, True),
    "O": Command(CommandKind.EDITOR_OPEN_LINE, False),
    "C": Command(CommandKind.EDITOR_DELETE_LINE_BY_END),
}

_INSERT_KEYS: dict[str, Command] = {
    "backspace": Command(CommandKind.EDITOR_INPUT_BACKSPACE),
    "delete": Command(CommandKind.EDITOR_INPUT_DELETE),
    "enter": Command(CommandKind.EDITOR_INPUT_ENTER),
    "left": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.BACK),
    "right": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.FORWARD),
    "up": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.UP),
    "down": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.DOWN),
    "home": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.HEAD),
    "end": Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.END),
    "pageup": Command(CommandKind.EDITOR_SCROLL, ScrollAmount.PAGE_UP),
    "pagedown": Command(CommandKind.EDITOR_SCROLL, ScrollAmount.PAGE_DOWN),
}

_TABLE_KEYS: dict[str, CommandKind] = {
    "[": CommandKind.TABLE_PREVIOUS_TAB,
    "]": CommandKind.TABLE_NEXT_TAB,
    "pagedown": CommandKind.TABLE_NEXT_PAGE,
    " ": CommandKind.TABLE_NEXT_PAGE,
    "pageup": CommandKind.TABLE_PREVIOUS_PAGE,
    "g": CommandKind.TABLE_JUMP_TO_FIRST_ROW,
    "G": CommandKind.TABLE_JUMP_TO_LAST_ROW,
    ">": CommandKind.TABLE_SCROLL_RIGHT,
    "<": CommandKind.TABLE_SCROLL_LEFT,
    "l": CommandKind.TABLE_NEXT_COLUMN,
    "right": CommandKind.TABLE_NEXT_COLUMN,
    "h": CommandKind.TABLE_PREVIOUS_COLUMN,
    "left": CommandKind.TABLE_PREVIOUS_COLUMN,
    "w": CommandKind.TABLE_WIDEN_COLUMN,
    "W": CommandKind.TABLE_NARROW_COLUMN,
    "n": CommandKind.TABLE_NEXT_COLOR,
    "p": CommandKind.TABLE_PREVIOUS_COLOR,
    "y": CommandKind.TABLE_COPY_SELECTED_CELL,
    "Y": CommandKind.TABLE_COPY_SELECTED_ROW,
    "C": CommandKind.TABLE_COPY_QUERY_TO_EDITOR,
    "R": CommandKind.TABLE_RUN_SELECTED_HISTORY_QUERY,
}

_TABLE_ROW_KEYS: dict[str, tuple[CommandKind, CommandKind]] = {
    # key -> (data-row command, history-row command)
    "j": (CommandKind.TABLE_NEXT_ROW, CommandKind.TABLE_NEXT_HISTORY_ROW),
    "down": (CommandKind.TABLE_NEXT_ROW, CommandKind.TABLE_NEXT_HISTORY_ROW),
    "k": (CommandKind.TABLE_PREVIOUS_ROW, CommandKind.TABLE_PREVIOUS_HISTORY_ROW),
    "up": (CommandKind.TABLE_PREVIOUS_ROW, CommandKind.TABLE_PREVIOUS_HISTORY_ROW),
}

_SIDEBAR_KEYS: dict[str, Command] = {
    "enter": Command(CommandKind.SIDEBAR_TOGGLE_SELECTED),
    " ": Command(CommandKind.SIDEBAR_TOGGLE_SELECTED),
    "left": Command(CommandKind.SIDEBAR_KEY_LEFT),
    "h": Command(CommandKind.SIDEBAR_KEY_LEFT),
    "right": Command(CommandKind.SIDEBAR_KEY_RIGHT),
    "l": Command(CommandKind.SIDEBAR_KEY_RIGHT),
    "down": Command(CommandKind.SIDEBAR_KEY_DOWN),
    "j": Command(CommandKind.SIDEBAR_KEY_DOWN),
    "up": Command(CommandKind.SIDEBAR_KEY_UP),
    "k": Command(CommandKind.SIDEBAR_KEY_UP),
    "escape": Command(CommandKind.SIDEBAR_DESELECT),
    "home": Command(CommandKind.SIDEBAR_SELECT_FIRST),
    "end": Command(CommandKind.SIDEBAR_SELECT_LAST),
    "pagedown": Command(CommandKind.SIDEBAR_SCROLL_DOWN, SIDEBAR_SCROLL_STEP),
    "pageup": Command(CommandKind.SIDEBAR_SCROLL_UP, SIDEBAR_SCROLL_STEP),
}


@dataclass(frozen=True)
class ResolverState:
    """Editor mode plus at most one buffered keystroke."""

    mode: EditorMode = field(default_factory=EditorMode.normal)
    pending_key: str | None = None

    def cleared(self) -> ResolverState:
        """Drop the pending key; an abandoned operator falls back to Normal."""
        if self.mode.mode is VimMode.OPERATOR:
            return ResolverState(EditorMode.normal())
        if self.pending_key is None:
            return self
        return ResolverState(self.mode)


Resolution = tuple[ResolverState, "Command | None"]


def resolve_key(state: ResolverState, key: KeyPress, focus: Focus, active_tab: int) -> Resolution:
    """Resolve one key event into at most one command and the next state."""
    if key.kind is not KeyKind.PRESS:
        return state, None

    global_command = _resolve_global(state, key, focus)
    if global_command is not None:
        return state.cleared(), global_command

    if focus is Focus.EDITOR:
        return _resolve_editor(state, key)

    state = state.cleared()
    if focus is Focus.TABLE:
        return state, _resolve_table(key.token, active_tab)
    return state, _SIDEBAR_KEYS.get(key.token)


def resolve_overlay(key: KeyPress) -> Command | None:
    """Key table used while the key map overlay is open."""
    if key.kind is not KeyKind.PRESS:
        return None
    kind = OVERLAY_KEYS.get(key.token)
    return Command(kind) if kind is not None else None


def _resolve_global(state: ResolverState, key: KeyPress, focus: Focus) -> Command | None:
    kind = GLOBAL_KEYS.get(key.key)
    if kind is not None:
        return Command(kind)
    typing_text = focus is Focus.EDITOR and state.mode.mode is VimMode.INSERT
    if key.is_printable and not typing_text:
        kind = PRINTABLE_GLOBAL_KEYS.get(key.token)
        if kind is not None:
            return Command(kind)
    return None


def _resolve_editor(state: ResolverState, key: KeyPress) -> Resolution:
    if state.pending_key is not None:
        return _resolve_pending(state, key.token)

    mode = state.mode.mode
    if mode is VimMode.INSERT:
        return _resolve_insert(state, key)
    if mode is VimMode.VISUAL:
        return _resolve_visual(state, key.token)
    if mode is VimMode.OPERATOR:
        # Operator mode without a buffered operator cannot be completed.
        return ResolverState(EditorMode.normal()), NOOP
    return _resolve_normal(state, key.token)


def _resolve_pending(state: ResolverState, token: str) -> Resolution:
    pending = state.pending_key
    if pending == "g":
        # Visual mode keeps its selection across a gg.
        next_state = state.cleared()
        if token == "g":
            return next_state, Command(CommandKind.EDITOR_MOVE_CURSOR, CursorMove.TOP)
        return next_state, NOOP

    normal = ResolverState(EditorMode.normal())
    if token == pending:
        if pending == "c":
            return ResolverState(EditorMode.insert()), Command(CommandKind.EDITOR_OPERATE_LINE, pending)
        return normal, Command(CommandKind.EDITOR_OPERATE_LINE, pending)

    motion = MOTION_KEYS.get(token)
    if motion is not None and pending is not None:
        operation = PendingOperation(pending, motion)
        return normal, Command(CommandKind.EDITOR_PERFORM_PENDING_OPERATOR, operation)
    return normal, NOOP


def _resolve_normal(state: ResolverState, token: str) -> Resolution:
    motion = MOTION_KEYS.get(token)
    if motion is not None:
        return state, Command(CommandKind.EDITOR_MOVE_CURSOR, motion)
    if token == "g":
        return ResolverState(state.mode, pending_key="g"), None
    if token in OPERATORS:
        mode = EditorMode.pending(token)
        return ResolverState(mode, pending_key=token), Command(CommandKind.EDITOR_SET_MODE, mode)
    if token in ("v", "V"):
        return ResolverState(EditorMode.visual()), Command(CommandKind.EDITOR_START_SELECTION)
    if token in _NORMAL_TO_INSERT:
        return ResolverState(EditorMode.insert()), _NORMAL_TO_INSERT[token]
    return state, _NORMAL_SIMPLE.get(token, NOOP)


def _resolve_insert(state: ResolverState, key: KeyPress) -> Resolution:
    if key.key in ("escape", "ctrl+c"):
        mode = EditorMode.normal()
        return ResolverState(mode), Command(CommandKind.EDITOR_SET_MODE, mode)
    command = _INSERT_KEYS.get(key.key)
    if command is not None:
        return state, command
    if key.is_printable:
        return state, Command(CommandKind.EDITOR_INPUT_CHAR, key.token)
    return state, NOOP


def _resolve_visual(state: ResolverState, token: str) -> Resolution:
    if token == "g":
        return ResolverState(state.mode, pending_key="g"), None
    motion = MOTION_KEYS.get(token)
    if motion is not None:
        return state, Command(CommandKind.EDITOR_MOVE_CURSOR, motion)
    normal = ResolverState(EditorMode.normal())
    if token == "y":
        return normal, Command(CommandKind.EDITOR_COPY_SELECTION)
    if token == "d":
        return normal, Command(CommandKind.EDITOR_CUT_SELECTION)
    if token == "c":
        return ResolverState(EditorMode.insert()), Command(CommandKind.EDITOR_CUT_SELECTION)
    if token in ("escape", "v"):
        return normal, Command(CommandKind.EDITOR_CANCEL_SELECTION)
    return state, NOOP


def _resolve_table(token: str, active_tab: int) -> Command | None:
    if len(token) == 1 and token in "123456789":
        return Command(CommandKind.TABLE_SET_TAB_INDEX, int(token) - 1)
    row_kinds = _TABLE_ROW_KEYS.get(token)
    if row_kinds is not None:
        data_kind, history_kind = row_kinds
        return Command(history_kind if active_tab == HISTORY_TAB_INDEX else data_kind)
    kind = _TABLE_KEYS.get(token)
    return Command(kind) if kind is not None else None


class ModalInputResolver:
    """Stateful wrapper that keeps the latest ``ResolverState``."""

    def __init__(self, state: ResolverState | None = None) -> None:
        self.state = state or ResolverState()

    @property
    def mode(self) -> EditorMode:
        return self.state.mode

    @property
    def pending_key(self) -> str | None:
        return self.state.pending_key

    def resolve(self, key: KeyPress, focus: Focus, active_tab: int) -> Command | None:
        self.state, command = resolve_key(self.state, key, focus, active_tab)
        return command

    def resolve_overlay(self, key: KeyPress) -> Command | None:
        return resolve_overlay(key)
