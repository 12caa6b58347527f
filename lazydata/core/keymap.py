"""Static key binding guide (descriptive only; resolution lives in key_resolver)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from lazydata.core.commands import CommandCategory
from lazydata.shared.core.debug_events import emit_debug_event

KEY_DISPLAY_OVERRIDES: dict[str, str] = {
    "space": "<space>",
    "escape": "<esc>",
    "enter": "<enter>",
    "delete": "<del>",
    "backspace": "<backspace>",
    "tab": "<tab>",
    "left": "<left>",
    "right": "<right>",
    "up": "<up>",
    "down": "<down>",
    "home": "<home>",
    "end": "<end>",
    "pageup": "<pgup>",
    "pagedown": "<pgdn>",
    "f5": "<F5>",
}

CATEGORY_TITLES: dict[CommandCategory, str] = {
    CommandCategory.GLOBAL: "GLOBAL",
    CommandCategory.EDITOR: "QUERY EDITOR",
    CommandCategory.TABLE: "RESULTS",
    CommandCategory.SIDEBAR: "SIDEBAR",
}


def format_key(key: str) -> str:
    """Format a key name (or ``a/b`` alternatives) for display."""
    if "/" in key and len(key) > 1:
        return "/".join(format_key(part) for part in key.split("/"))
    if key in KEY_DISPLAY_OVERRIDES:
        return KEY_DISPLAY_OVERRIDES[key]
    if key.startswith("ctrl+"):
        return f"^{key.split('+', 1)[1]}"
    return key


@dataclass(frozen=True)
class KeyBindingDef:
    """One row of the key guide."""

    key: str
    description: str
    category: CommandCategory
    mode: str | None = None  # editor sub-section ("Normal", "Insert", ...)


class KeymapProvider(ABC):
    """Abstract base class for key guide providers."""

    @abstractmethod
    def get_bindings(self) -> list[KeyBindingDef]:
        raise NotImplementedError

    def bindings_for(self, category: CommandCategory) -> list[KeyBindingDef]:
        return [b for b in self.get_bindings() if b.category is category]

    def keys_for(self, description: str) -> list[str]:
        return [b.key for b in self.get_bindings() if b.description == description]


class DefaultKeymapProvider(KeymapProvider):
    """Built-in key guide matching the resolver's tables."""

    def __init__(self) -> None:
        self._bindings_cache: list[KeyBindingDef] | None = None

    def get_bindings(self) -> list[KeyBindingDef]:
        if self._bindings_cache is None:
            self._bindings_cache = self._build_bindings()
            emit_debug_event(
                "keybinding.register",
                category="keybinding",
                provider=self.__class__.__name__,
                count=len(self._bindings_cache),
            )
        return self._bindings_cache

    def _build_bindings(self) -> list[KeyBindingDef]:
        g = CommandCategory.GLOBAL
        e = CommandCategory.EDITOR
        t = CommandCategory.TABLE
        s = CommandCategory.SIDEBAR
        return [
            KeyBindingDef("q/ctrl+q", "Quit", g),
            KeyBindingDef("?", "Show key maps", g),
            KeyBindingDef("tab", "Cycle focus (sidebar, editor, results)", g),
            KeyBindingDef("f5", "Execute query", g),
            # Editor: normal mode
            KeyBindingDef("i", "Insert mode", e, "Normal"),
            KeyBindingDef("a/A", "Append after cursor / at line end", e, "Normal"),
            KeyBindingDef("I", "Insert at line start", e, "Normal"),
            KeyBindingDef("o/O", "Open line below / above", e, "Normal"),
            KeyBindingDef("v/V", "Visual mode", e, "Normal"),
            KeyBindingDef("h/j/k/l", "Move left / down / up / right", e, "Normal"),
            KeyBindingDef("w/e/b", "Word forward / word end / word back", e, "Normal"),
            KeyBindingDef("0/^/$", "Line start / line start / line end", e, "Normal"),
            KeyBindingDef("gg/G", "Top / bottom of query", e, "Normal"),
            KeyBindingDef("y/d/c", "Yank / delete / change + motion", e, "Normal"),
            KeyBindingDef("yy/dd/cc", "Yank / delete / change line", e, "Normal"),
            KeyBindingDef("D", "Delete to line end", e, "Normal"),
            KeyBindingDef("C", "Change to line end", e, "Normal"),
            KeyBindingDef("x", "Delete character", e, "Normal"),
            KeyBindingDef("p", "Paste", e, "Normal"),
            KeyBindingDef("u/ctrl+r", "Undo / redo", e, "Normal"),
            KeyBindingDef("ctrl+e/ctrl+y", "Scroll down / up one line", e, "Normal"),
            KeyBindingDef("ctrl+d/ctrl+u", "Half page down / up", e, "Normal"),
            KeyBindingDef("ctrl+f/ctrl+b", "Page down / up", e, "Normal"),
            # Editor: insert mode
            KeyBindingDef("escape/ctrl+c", "Back to normal mode", e, "Insert"),
            KeyBindingDef("backspace/delete", "Delete before / after cursor", e, "Insert"),
            KeyBindingDef("enter", "New line", e, "Insert"),
            KeyBindingDef("home/end", "Line start / end", e, "Insert"),
            # Editor: visual mode
            KeyBindingDef("y", "Copy selection", e, "Visual"),
            KeyBindingDef("d", "Cut selection", e, "Visual"),
            KeyBindingDef("c", "Cut selection and insert", e, "Visual"),
            KeyBindingDef("escape/v", "Cancel selection", e, "Visual"),
            # Results
            KeyBindingDef("[/]", "Previous / next tab", t),
            KeyBindingDef("1-9", "Jump to tab", t),
            KeyBindingDef("j/k", "Next / previous row", t),
            KeyBindingDef("h/l", "Previous / next column", t),
            KeyBindingDef("g/G", "First / last row", t),
            KeyBindingDef("pagedown/space", "Next page", t),
            KeyBindingDef("pageup", "Previous page", t),
            KeyBindingDef("</>", "Scroll left / right", t),
            KeyBindingDef("w/W", "Widen / narrow column", t),
            KeyBindingDef("n/p", "Next / previous color", t),
            KeyBindingDef("y", "Copy cell", t),
            KeyBindingDef("Y", "Copy row as JSON", t),
            KeyBindingDef("C", "Copy history query to editor", t),
            KeyBindingDef("R", "Run selected history query", t),
            # Sidebar
            KeyBindingDef("enter/space", "Expand / collapse", s),
            KeyBindingDef("j/k", "Next / previous item", s),
            KeyBindingDef("h/l", "Collapse or parent / expand", s),
            KeyBindingDef("home/end", "First / last item", s),
            KeyBindingDef("pagedown/pageup", "Scroll down / up", s),
            KeyBindingDef("escape", "Clear selection", s),
        ]


_keymap_provider: KeymapProvider | None = None


def get_keymap() -> KeymapProvider:
    global _keymap_provider
    if _keymap_provider is None:
        _keymap_provider = DefaultKeymapProvider()
    return _keymap_provider


def set_keymap(provider: KeymapProvider) -> None:
    global _keymap_provider
    _keymap_provider = provider


def reset_keymap() -> None:
    global _keymap_provider
    _keymap_provider = None


def generate_help_lines(keymap: KeymapProvider | None = None) -> list[str]:
    """Render the key guide as Rich markup lines, grouped by category."""
    from rich.markup import escape

    keymap = keymap or get_keymap()

    def section(title: str) -> str:
        return f"[bold]{title}[/]\n[dim]{'-' * 56}[/]"

    def binding(key: str, desc: str, indent: int = 2) -> str:
        pad = " " * indent
        label = format_key(key)
        fill = " " * max(0, 18 - len(label))
        return f"{pad}[bold yellow]{escape(label)}{fill}[/] [dim]-[/] {escape(desc)}"

    lines: list[str] = []
    for category in CommandCategory:
        entries = keymap.bindings_for(category)
        if not entries:
            continue
        lines.extend(section(CATEGORY_TITLES[category]).split("\n"))
        current_mode: str | None = None
        for entry in entries:
            if entry.mode != current_mode and entry.mode is not None:
                lines.append(f" [italic]{entry.mode} mode[/]")
            current_mode = entry.mode
            lines.append(binding(entry.key, entry.description, indent=4 if entry.mode else 2))
        lines.append("")
    return lines
