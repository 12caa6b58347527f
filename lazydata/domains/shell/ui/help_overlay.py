"""Key map overlay drawn over the main layout."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from lazydata.core.keymap import KeymapProvider, generate_help_lines

FOOTER = "[dim]j/k scroll  ·  ?/esc close[/]"


def clamp_scroll(scroll: int, total: int, height: int) -> int:
    return max(0, min(scroll, total - height))


class KeyMapOverlay(Static):
    """Scrollable key guide; hidden until ``show`` is called."""

    DEFAULT_CSS = """
    KeyMapOverlay {
        layer: overlay;
        dock: top;
        display: none;
        width: 80;
        height: 80%;
        margin: 2 0 0 10;
        padding: 0 1;
        background: $panel;
        border: round $primary;
        border-title-color: $primary;
    }
    """

    can_focus = False

    def __init__(self, keymap: KeymapProvider | None = None, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.lines = generate_help_lines(keymap)
        self.border_title = "Key maps"

    def show(self, scroll: int) -> int:
        """Render starting at ``scroll`` and return the scroll actually used."""
        self.display = True
        height = max(1, (self.content_size.height or 20) - 1)
        scroll = clamp_scroll(scroll, len(self.lines), height)
        body = Text.from_markup("\n".join(self.lines[scroll : scroll + height]))
        body.append("\n")
        body.append_text(Text.from_markup(FOOTER))
        self.update(body)
        return scroll

    def hide(self) -> None:
        self.display = False
