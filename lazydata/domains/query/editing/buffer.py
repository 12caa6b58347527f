"""Query editor buffer: text, cursor, selection, register and undo history.

``EditorBuffer`` is a plain model. It applies editor commands and knows
nothing about widgets; the editor view renders it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from lazydata.core.commands import Command, CommandKind, CursorMove, PendingOperation, ScrollAmount
from lazydata.core.vim import EditorMode, VimMode
from lazydata.db.exceptions import ClipboardError
from lazydata.shared.core.debug_events import emit_debug_event
from lazydata.shared.ui.clipboard import Clipboard

from .motions import MOTIONS, MotionResult, Position

UNDO_LIMIT = 200
DEFAULT_VIEWPORT_HEIGHT = 10


@dataclass(frozen=True)
class Register:
    """Yanked text; linewise registers paste as whole lines."""

    text: str = ""
    linewise: bool = False


@dataclass(frozen=True)
class _Snapshot:
    lines: tuple[str, ...]
    row: int
    col: int


class EditorBuffer:
    """Multi-line text with a Vim-style cursor."""

    def __init__(self, text: str = "", *, clipboard: Clipboard | None = None) -> None:
        self.lines: list[str] = text.split("\n") if text else [""]
        self.row = 0
        self.col = 0
        self.mode: EditorMode = EditorMode.normal()
        self.anchor: Position | None = None
        self.register = Register()
        self.scroll_row = 0
        self.scroll_col = 0
        self.viewport_height = DEFAULT_VIEWPORT_HEIGHT
        self.clipboard = clipboard
        self._undo: list[_Snapshot] = []
        self._redo: list[_Snapshot] = []
        self._last_kind: CommandKind | None = None
        self._handlers: dict[CommandKind, Callable[[Command], None]] = {
            CommandKind.EDITOR_INPUT_CHAR: self._input_char,
            CommandKind.EDITOR_INPUT_BACKSPACE: lambda _c: self.backspace(),
            CommandKind.EDITOR_INPUT_DELETE: lambda _c: self.delete_next_char(),
            CommandKind.EDITOR_INPUT_ENTER: lambda _c: self.insert_newline(),
            CommandKind.EDITOR_MOVE_CURSOR: lambda c: self.move_cursor(c.payload),
            CommandKind.EDITOR_DELETE_LINE_BY_END: lambda _c: self.delete_to_line_end(),
            CommandKind.EDITOR_CANCEL_SELECTION: lambda _c: self.cancel_selection(),
            CommandKind.EDITOR_PASTE: lambda _c: self.paste(),
            CommandKind.EDITOR_UNDO: lambda _c: self.undo(),
            CommandKind.EDITOR_REDO: lambda _c: self.redo(),
            CommandKind.EDITOR_DELETE_NEXT_CHAR: lambda _c: self.delete_next_char(),
            CommandKind.EDITOR_OPEN_LINE: lambda c: self.open_line(below=c.payload),
            CommandKind.EDITOR_SET_MODE: lambda c: self.set_mode(c.payload),
            CommandKind.EDITOR_SCROLL_RELATIVE: lambda c: self.scroll_relative(*c.payload),
            CommandKind.EDITOR_SCROLL: lambda c: self.scroll(c.payload),
            CommandKind.EDITOR_START_SELECTION: lambda _c: self.start_selection(),
            CommandKind.EDITOR_COPY_SELECTION: lambda _c: self.copy_selection(),
            CommandKind.EDITOR_CUT_SELECTION: lambda _c: self.cut_selection(),
            CommandKind.EDITOR_OPERATE_LINE: lambda c: self.operate_line(c.payload),
            CommandKind.EDITOR_PERFORM_PENDING_OPERATOR: lambda c: self.perform_pending_operator(c.payload),
        }

    # ------------------------------------------------------------------
    # Text access
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def cursor(self) -> tuple[int, int]:
        return self.row, self.col

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    def set_text(self, text: str) -> None:
        """Replace the whole buffer, leaving the cursor at the end."""
        self._push_undo()
        self.lines = text.split("\n") if text else [""]
        self.row = len(self.lines) - 1
        self.col = len(self.lines[-1])
        self.anchor = None
        self._clamp_cursor()
        self._ensure_cursor_visible()

    def apply(self, command: Command, mode: EditorMode | None = None) -> bool:
        """Apply an editor command. Returns False for non-editor commands.

        ``mode`` is the resolver's mode after the key that produced
        ``command``; it is in effect while the command runs, so that ``A``
        can land past the last character.
        """
        handler = self._handlers.get(command.kind)
        if handler is None:
            return False
        if mode is not None:
            self.mode = mode
        handler(command)
        if mode is not None:
            self.set_mode(mode)
        self._last_kind = command.kind
        self._ensure_cursor_visible()
        return True

    # ------------------------------------------------------------------
    # Mode and cursor
    # ------------------------------------------------------------------

    def set_mode(self, mode: EditorMode) -> None:
        self.mode = mode
        if mode.mode is not VimMode.VISUAL:
            self.anchor = None
        self._clamp_cursor()

    def _max_col(self, row: int) -> int:
        length = len(self.lines[row])
        if self.mode.mode is VimMode.INSERT:
            return length
        return max(0, length - 1)

    def _clamp_cursor(self) -> None:
        self.row = max(0, min(self.row, len(self.lines) - 1))
        self.col = max(0, min(self.col, self._max_col(self.row)))

    def move_cursor(self, move: CursorMove) -> None:
        result = MOTIONS[move](self.lines, self.row, self.col)
        self.row, self.col = result.position.row, result.position.col
        self._clamp_cursor()

    # ------------------------------------------------------------------
    # Insert-mode editing
    # ------------------------------------------------------------------

    def _input_char(self, command: Command) -> None:
        self.insert_text(command.payload, coalesce=self._last_kind is CommandKind.EDITOR_INPUT_CHAR)

    def insert_text(self, text: str, *, coalesce: bool = False) -> None:
        if not coalesce:
            self._push_undo()
        line = self.lines[self.row]
        col = min(self.col, len(line))
        before, after = line[:col], line[col:]
        parts = text.split("\n")
        if len(parts) == 1:
            self.lines[self.row] = before + text + after
            self.col = col + len(text)
            return
        new_lines = [before + parts[0], *parts[1:-1], parts[-1] + after]
        self.lines[self.row : self.row + 1] = new_lines
        self.row += len(new_lines) - 1
        self.col = len(parts[-1])

    def insert_newline(self) -> None:
        self.insert_text("\n")

    def backspace(self) -> None:
        if self.col == 0 and self.row == 0:
            return
        self._push_undo()
        if self.col > 0:
            line = self.lines[self.row]
            col = min(self.col, len(line))
            self.lines[self.row] = line[: col - 1] + line[col:]
            self.col = col - 1
            return
        previous = self.lines[self.row - 1]
        self.lines[self.row - 1] = previous + self.lines[self.row]
        del self.lines[self.row]
        self.row -= 1
        self.col = len(previous)

    def delete_next_char(self) -> None:
        line = self.lines[self.row]
        if self.col < len(line):
            self._push_undo()
            self.lines[self.row] = line[: self.col] + line[self.col + 1 :]
        elif self.mode.mode is VimMode.INSERT and self.row < len(self.lines) - 1:
            self._push_undo()
            self.lines[self.row] = line + self.lines[self.row + 1]
            del self.lines[self.row + 1]
        self._clamp_cursor()

    def delete_to_line_end(self) -> None:
        line = self.lines[self.row]
        if self.col >= len(line):
            return
        self._push_undo()
        self._store_register(line[self.col :], linewise=False)
        self.lines[self.row] = line[: self.col]
        self._clamp_cursor()

    def open_line(self, *, below: bool) -> None:
        self._push_undo()
        index = self.row + 1 if below else self.row
        self.lines.insert(index, "")
        self.row = index
        self.col = 0

    # ------------------------------------------------------------------
    # Registers and clipboard
    # ------------------------------------------------------------------

    def _store_register(self, text: str, *, linewise: bool) -> None:
        self.register = Register(text, linewise)
        if self.clipboard is None:
            return
        try:
            self.clipboard.set_text(text)
        except ClipboardError as e:
            emit_debug_event("editor.clipboard_failed", category="editor", error=str(e))

    def paste(self) -> None:
        register = self.register
        if not register.text and not register.linewise:
            return
        self._push_undo()
        if register.linewise:
            new_lines = register.text.split("\n")
            self.lines[self.row + 1 : self.row + 1] = new_lines
            self.row += 1
            self.col = 0
            return
        line = self.lines[self.row]
        insert_at = min(self.col + 1, len(line)) if line else 0
        self.col = insert_at
        self.insert_text(register.text, coalesce=True)
        self.col = max(0, self.col - 1)
        self._clamp_cursor()

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    def _snapshot(self) -> _Snapshot:
        return _Snapshot(tuple(self.lines), self.row, self.col)

    def _restore(self, snapshot: _Snapshot) -> None:
        self.lines = list(snapshot.lines)
        self.row, self.col = snapshot.row, snapshot.col
        self.anchor = None
        self._clamp_cursor()

    def _push_undo(self) -> None:
        self._undo.append(self._snapshot())
        if len(self._undo) > UNDO_LIMIT:
            del self._undo[0]
        self._redo.clear()

    def undo(self) -> None:
        if not self._undo:
            return
        self._redo.append(self._snapshot())
        self._restore(self._undo.pop())

    def redo(self) -> None:
        if not self._redo:
            return
        self._undo.append(self._snapshot())
        self._restore(self._redo.pop())

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def start_selection(self) -> None:
        self.mode = EditorMode.visual()
        self._clamp_cursor()
        self.anchor = Position(self.row, self.col)

    def cancel_selection(self) -> None:
        self.anchor = None

    def selection_range(self) -> tuple[Position, Position] | None:
        """Inclusive (start, end) of the visual selection."""
        if self.anchor is None:
            return None
        cursor = Position(self.row, self.col)
        return (self.anchor, cursor) if self.anchor <= cursor else (cursor, self.anchor)

    def selected_text(self) -> str:
        selection = self.selection_range()
        if selection is None:
            return ""
        start, end = selection
        return self._slice(start, Position(end.row, end.col + 1))

    def copy_selection(self) -> None:
        selection = self.selection_range()
        if selection is None:
            return
        self._store_register(self.selected_text(), linewise=False)
        self.row, self.col = selection[0].row, selection[0].col
        self.anchor = None
        self._clamp_cursor()

    def cut_selection(self) -> None:
        selection = self.selection_range()
        if selection is None:
            return
        start, end = selection
        self._push_undo()
        self._store_register(self.selected_text(), linewise=False)
        self._delete_span(start, Position(end.row, end.col + 1))
        self.anchor = None
        self._clamp_cursor()

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def operate_line(self, operator: str) -> None:
        """yy, dd and cc on the cursor line."""
        line = self.lines[self.row]
        if operator == "y":
            self._store_register(line, linewise=True)
            return
        self._push_undo()
        self._store_register(line, linewise=True)
        if operator == "c":
            self.lines[self.row] = ""
            self.col = 0
            return
        if len(self.lines) == 1:
            self.lines = [""]
        else:
            del self.lines[self.row]
        self.col = 0
        self._clamp_cursor()

    def perform_pending_operator(self, operation: PendingOperation) -> None:
        result = MOTIONS[operation.motion](self.lines, self.row, self.col)
        if result.linewise:
            self._operate_lines(operation.operator, result)
        else:
            self._operate_chars(operation.operator, operation.motion, result)
        self._clamp_cursor()

    def _operate_lines(self, operator: str, result: MotionResult) -> None:
        first, last = sorted((self.row, result.position.row))
        text = "\n".join(self.lines[first : last + 1])
        if operator == "y":
            self._store_register(text, linewise=True)
            self.row = first
            return
        self._push_undo()
        self._store_register(text, linewise=True)
        if operator == "c":
            self.lines[first : last + 1] = [""]
        else:
            self.lines[first : last + 1] = []
            if not self.lines:
                self.lines = [""]
        self.row, self.col = first, 0

    def _operate_chars(self, operator: str, motion: CursorMove, result: MotionResult) -> None:
        cursor = Position(self.row, self.col)
        target = result.position
        if motion is CursorMove.WORD_FORWARD and target.row > cursor.row:
            # dw on the last word of a line stops at the line end.
            target = Position(cursor.row, len(self.lines[cursor.row]))
        start, end = (cursor, target) if cursor <= target else (target, cursor)
        if result.inclusive:
            end = Position(end.row, end.col + 1)
        if start == end:
            return
        text = self._slice(start, end)
        if operator == "y":
            self._store_register(text, linewise=False)
            self.row, self.col = start.row, start.col
            return
        self._push_undo()
        self._store_register(text, linewise=False)
        self._delete_span(start, end)

    def _slice(self, start: Position, end: Position) -> str:
        """Text from ``start`` up to but excluding ``end``."""
        if start.row == end.row:
            return self.lines[start.row][start.col : end.col]
        parts = [self.lines[start.row][start.col :]]
        parts.extend(self.lines[start.row + 1 : end.row])
        parts.append(self.lines[end.row][: end.col])
        return "\n".join(parts)

    def _delete_span(self, start: Position, end: Position) -> None:
        head = self.lines[start.row][: start.col]
        tail = self.lines[end.row][end.col :]
        self.lines[start.row : end.row + 1] = [head + tail]
        self.row, self.col = start.row, start.col

    # ------------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------------

    def scroll_relative(self, rows: int, cols: int) -> None:
        max_scroll = max(0, len(self.lines) - 1)
        self.scroll_row = max(0, min(self.scroll_row + rows, max_scroll))
        self.scroll_col = max(0, self.scroll_col + cols)
        # Keep the cursor inside the viewport.
        bottom = self.scroll_row + max(1, self.viewport_height) - 1
        self.row = max(self.scroll_row, min(self.row, bottom, len(self.lines) - 1))
        self._clamp_cursor()

    def scroll(self, amount: ScrollAmount) -> None:
        height = max(1, self.viewport_height)
        step = {
            ScrollAmount.HALF_PAGE_DOWN: max(1, height // 2),
            ScrollAmount.HALF_PAGE_UP: -max(1, height // 2),
            ScrollAmount.PAGE_DOWN: height,
            ScrollAmount.PAGE_UP: -height,
        }[amount]
        self.row = max(0, min(self.row + step, len(self.lines) - 1))
        self._clamp_cursor()

    def _ensure_cursor_visible(self) -> None:
        height = max(1, self.viewport_height)
        if self.row < self.scroll_row:
            self.scroll_row = self.row
        elif self.row >= self.scroll_row + height:
            self.scroll_row = self.row - height + 1
