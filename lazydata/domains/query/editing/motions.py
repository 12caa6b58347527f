"""Vim motions over a list of lines.

Each motion takes ``(lines, row, col)`` and returns a ``MotionResult``: where
the cursor lands, plus how an operator should treat the covered span
(linewise or charwise, inclusive or exclusive of the target).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from lazydata.core.commands import CursorMove


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int


@dataclass(frozen=True)
class MotionResult:
    position: Position
    linewise: bool = False
    inclusive: bool = False


MotionFunc = Callable[[list[str], int, int], MotionResult]


def char_class(ch: str) -> int:
    """0 for blanks, 1 for word characters, 2 for punctuation."""
    if not ch or ch.isspace():
        return 0
    if ch.isalnum() or ch == "_":
        return 1
    return 2


def _char_at(lines: list[str], pos: Position) -> str:
    line = lines[pos.row]
    return line[pos.col] if pos.col < len(line) else ""


def _next_pos(lines: list[str], pos: Position) -> Position | None:
    if pos.col < len(lines[pos.row]) - 1:
        return Position(pos.row, pos.col + 1)
    if pos.row < len(lines) - 1:
        return Position(pos.row + 1, 0)
    return None


def _prev_pos(lines: list[str], pos: Position) -> Position | None:
    if pos.col > 0:
        return Position(pos.row, min(pos.col, len(lines[pos.row])) - 1)
    if pos.row > 0:
        prev_len = len(lines[pos.row - 1])
        return Position(pos.row - 1, max(0, prev_len - 1))
    return None


def _is_blank(lines: list[str], pos: Position) -> bool:
    # An empty line counts as a word boundary stop for w and b.
    return char_class(_char_at(lines, pos)) == 0 and bool(lines[pos.row])


def clamp_col(lines: list[str], row: int, col: int) -> int:
    return max(0, min(col, len(lines[row])))


def motion_back(lines: list[str], row: int, col: int) -> MotionResult:
    return MotionResult(Position(row, max(0, col - 1)))


def motion_forward(lines: list[str], row: int, col: int) -> MotionResult:
    return MotionResult(Position(row, min(col + 1, len(lines[row]))))


def motion_up(lines: list[str], row: int, col: int) -> MotionResult:
    new_row = max(0, row - 1)
    return MotionResult(Position(new_row, clamp_col(lines, new_row, col)), linewise=True)


def motion_down(lines: list[str], row: int, col: int) -> MotionResult:
    new_row = min(row + 1, len(lines) - 1)
    return MotionResult(Position(new_row, clamp_col(lines, new_row, col)), linewise=True)


def motion_word_forward(lines: list[str], row: int, col: int) -> MotionResult:
    """Start of the next word (w)."""
    pos = Position(row, min(col, max(0, len(lines[row]) - 1)))
    start_class = char_class(_char_at(lines, pos))
    # Skip the rest of the current word.
    while start_class != 0:
        nxt = _next_pos(lines, pos)
        if nxt is None:
            return MotionResult(Position(row, len(lines[row])))
        crossed = nxt.row != pos.row
        pos = nxt
        if crossed or char_class(_char_at(lines, pos)) != start_class:
            break
    # Skip blanks, stopping on an empty line.
    while _is_blank(lines, pos):
        nxt = _next_pos(lines, pos)
        if nxt is None:
            return MotionResult(Position(pos.row, len(lines[pos.row])))
        pos = nxt
    return MotionResult(pos)


def motion_word_end(lines: list[str], row: int, col: int) -> MotionResult:
    """End of the current or next word (e)."""
    pos = Position(row, col)
    nxt = _next_pos(lines, pos)
    if nxt is None:
        return MotionResult(pos, inclusive=True)
    pos = nxt
    while char_class(_char_at(lines, pos)) == 0:
        nxt = _next_pos(lines, pos)
        if nxt is None:
            return MotionResult(pos, inclusive=True)
        pos = nxt
    current = char_class(_char_at(lines, pos))
    while True:
        nxt = _next_pos(lines, pos)
        if nxt is None or nxt.row != pos.row or char_class(_char_at(lines, nxt)) != current:
            return MotionResult(pos, inclusive=True)
        pos = nxt


def motion_word_back(lines: list[str], row: int, col: int) -> MotionResult:
    """Start of the current or previous word (b)."""
    pos = Position(row, col)
    prev = _prev_pos(lines, pos)
    if prev is None:
        return MotionResult(Position(row, 0))
    pos = prev
    while char_class(_char_at(lines, pos)) == 0 and lines[pos.row]:
        prev = _prev_pos(lines, pos)
        if prev is None:
            return MotionResult(Position(0, 0))
        pos = prev
    current = char_class(_char_at(lines, pos))
    while pos.col > 0 and char_class(lines[pos.row][pos.col - 1]) == current:
        pos = Position(pos.row, pos.col - 1)
    return MotionResult(pos)


def motion_line_head(lines: list[str], row: int, col: int) -> MotionResult:
    return MotionResult(Position(row, 0))


def motion_line_end(lines: list[str], row: int, col: int) -> MotionResult:
    return MotionResult(Position(row, len(lines[row])))


def motion_top(lines: list[str], row: int, col: int) -> MotionResult:
    return MotionResult(Position(0, 0), linewise=True)


def motion_bottom(lines: list[str], row: int, col: int) -> MotionResult:
    return MotionResult(Position(len(lines) - 1, 0), linewise=True)


MOTIONS: dict[CursorMove, MotionFunc] = {
    CursorMove.BACK: motion_back,
    CursorMove.FORWARD: motion_forward,
    CursorMove.UP: motion_up,
    CursorMove.DOWN: motion_down,
    CursorMove.WORD_FORWARD: motion_word_forward,
    CursorMove.WORD_END: motion_word_end,
    CursorMove.WORD_BACK: motion_word_back,
    CursorMove.HEAD: motion_line_head,
    CursorMove.END: motion_line_end,
    CursorMove.TOP: motion_top,
    CursorMove.BOTTOM: motion_bottom,
}
