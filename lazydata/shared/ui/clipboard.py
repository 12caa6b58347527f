"""Clipboard side channel used by copy commands."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from lazydata.db.exceptions import ClipboardError
from lazydata.shared.core.debug_events import emit_debug_event


class Clipboard(Protocol):
    def set_text(self, text: str) -> None:
        """Write ``text`` to the clipboard, raising ClipboardError on failure."""
        ...


class SystemClipboard:
    """Clipboard backed by pyperclip, falling back to the terminal (OSC 52).

    ``terminal_copy`` is typically ``App.copy_to_clipboard``; it is tried only
    when pyperclip has no usable backend (headless Linux, SSH sessions).
    """

    def __init__(self, terminal_copy: Callable[[str], None] | None = None) -> None:
        self.terminal_copy = terminal_copy

    def set_text(self, text: str) -> None:
        import pyperclip

        try:
            pyperclip.copy(text)
            return
        except pyperclip.PyperclipException as exc:
            emit_debug_event("clipboard.pyperclip_failed", category="clipboard", error=str(exc))
            if self.terminal_copy is None:
                raise ClipboardError(str(exc)) from exc
        try:
            self.terminal_copy(text)
        except Exception as exc:
            raise ClipboardError(str(exc)) from exc
