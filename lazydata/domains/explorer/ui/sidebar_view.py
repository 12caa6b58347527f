"""Sidebar widget rendering ``SidebarState`` as an indented tree."""

from __future__ import annotations

from rich.style import Style
from rich.text import Text
from textual.widgets import Static

from lazydata.domains.explorer.state.sidebar import SidebarState

INDENT = "  "
SELECTED_STYLE = Style(reverse=True, bold=True)


def render_sidebar(state: SidebarState, *, height: int) -> Text:
    rows = state.visible_rows()
    text = Text(no_wrap=True, overflow="ellipsis")
    if not rows:
        text.append("No databases", style="grey50")
        return text
    visible = rows[state.scroll_offset : state.scroll_offset + max(1, height)]
    for index, row in enumerate(visible):
        if index:
            text.append("\n")
        if row.expandable:
            marker = "▼ " if row.expanded else "▶ "
        else:
            marker = "  "
        line = Text(f"{INDENT * row.depth}{marker}{row.label}")
        if row.node.get_node_kind() == "database":
            line.stylize("bold")
        elif row.node.get_node_kind() == "folder":
            line.stylize("cyan")
        if row.path == state.selected:
            line.stylize(SELECTED_STYLE)
        text.append_text(line)
    return text


class SidebarView(Static):
    DEFAULT_CSS = """
    SidebarView {
        height: 1fr;
    }
    """

    can_focus = False

    def __init__(self, state: SidebarState, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.state = state

    def refresh_state(self) -> None:
        height = self.content_size.height or self.state.viewport_height
        self.state.viewport_height = height
        self.update(render_sidebar(self.state, height=height))
