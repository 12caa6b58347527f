"""Terminal key events as seen by the input resolver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from textual.events import Key


class KeyKind(Enum):
    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyPress:
    """A physical key event.

    ``key`` uses Textual key names ("escape", "ctrl+r", "pagedown", ...).
    ``character`` is set for printable keys and is what the resolver matches
    on for those, so "G", "$" and " " need no name lookup.
    """

    key: str
    character: str | None = None
    kind: KeyKind = KeyKind.PRESS

    @property
    def token(self) -> str:
        """Lookup token: the printed character when there is one, else the key name."""
        if self.character is not None and len(self.character) == 1 and self.character.isprintable():
            return self.character
        return self.key

    @property
    def is_printable(self) -> bool:
        return self.token == self.character

    @classmethod
    def from_textual(cls, event: Key) -> KeyPress:
        # Textual's terminal driver only reports key presses.
        character = event.character if event.is_printable else None
        return cls(key=event.key, character=character)

    @classmethod
    def char(cls, character: str) -> KeyPress:
        """Build a printable key press (mostly for tests)."""
        return cls(key=character, character=character)
