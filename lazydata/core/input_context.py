"""UI-agnostic input context used for key resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lazydata.core.vim import EditorMode


class Focus(Enum):
    """Panel that currently owns keyboard input."""

    SIDEBAR = "sidebar"
    EDITOR = "editor"
    TABLE = "table"

    def next(self) -> Focus:
        order = list(Focus)
        return order[(order.index(self) + 1) % len(order)]

    @property
    def title(self) -> str:
        return {
            Focus.SIDEBAR: "Sidebar",
            Focus.EDITOR: "Editor",
            Focus.TABLE: "Table",
        }[self]


@dataclass
class InputContext:
    """Snapshot of UI input state shown in the status bar."""

    focus: Focus
    mode: EditorMode
    pending_key: str | None = None
    query_executing: bool = False
    connection_name: str | None = None
