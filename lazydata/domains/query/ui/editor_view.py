"""Query editor widget: renders an ``EditorBuffer`` with cursor and selection."""

from __future__ import annotations

from rich.style import Style
from rich.text import Text
from textual.widgets import Static

from lazydata.core.vim import VimMode
from lazydata.domains.query.editing.buffer import EditorBuffer

CURSOR_STYLE = Style(reverse=True)
SELECTION_STYLE = Style(bgcolor="grey35")
LINE_NUMBER_STYLE = Style(color="grey50")


def render_editor(buffer: EditorBuffer, *, height: int, show_cursor: bool = True) -> Text:
    """Render the visible window of ``buffer`` as Rich text."""
    text = Text(no_wrap=True, overflow="crop")
    gutter = len(str(len(buffer.lines)))
    selection = buffer.selection_range()
    start_row = buffer.scroll_row
    end_row = min(len(buffer.lines), start_row + max(1, height))
    for row in range(start_row, end_row):
        if row > start_row:
            text.append("\n")
        text.append(f"{row + 1:>{gutter}} ", style=LINE_NUMBER_STYLE)
        line = buffer.lines[row][buffer.scroll_col :]
        line_text = Text(line)
        if selection is not None:
            start, end = selection
            if start.row <= row <= end.row:
                sel_start = start.col if row == start.row else 0
                sel_end = end.col + 1 if row == end.row else len(buffer.lines[row]) + 1
                line_text.stylize(
                    SELECTION_STYLE,
                    max(0, sel_start - buffer.scroll_col),
                    max(0, sel_end - buffer.scroll_col),
                )
        if show_cursor and row == buffer.row:
            col = buffer.col - buffer.scroll_col
            if col >= len(line):
                line_text.append(" " * (col - len(line) + 1))
            if col >= 0:
                line_text.stylize(CURSOR_STYLE, col, col + 1)
        text.append_text(line_text)
    return text


class QueryEditor(Static):
    """Non-focusable view; keys reach the app, which drives the buffer."""

    DEFAULT_CSS = """
    QueryEditor {
        height: 1fr;
        padding: 0 1;
    }
    """

    can_focus = False

    def __init__(self, buffer: EditorBuffer, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.buffer = buffer
        self.show_cursor = False

    def refresh_buffer(self, *, active: bool) -> None:
        self.show_cursor = active
        height = self.content_size.height or self.buffer.viewport_height
        self.buffer.viewport_height = height
        self.update(render_editor(self.buffer, height=height, show_cursor=active))


def mode_title(buffer: EditorBuffer) -> str:
    label = buffer.mode.label
    if buffer.mode.mode is VimMode.INSERT:
        return f"Query [green]-- {label} --[/]"
    if buffer.mode.mode is VimMode.VISUAL:
        return f"Query [magenta]-- {label} --[/]"
    return f"Query [orange1]-- {label} --[/]"
