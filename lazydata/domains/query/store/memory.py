"""In-memory history store for tests."""

from __future__ import annotations

from collections.abc import Iterable

from lazydata.domains.query.store.history import QueryHistoryEntry


class InMemoryHistoryStore:
    """History store that keeps entries in a list."""

    def __init__(self, entries: Iterable[QueryHistoryEntry] = ()) -> None:
        self._entries: list[QueryHistoryEntry] = list(entries)
        self.save_count = 0

    def load_all(self) -> list[QueryHistoryEntry]:
        return list(self._entries)

    def save_all(self, entries: Iterable[QueryHistoryEntry]) -> None:
        self._entries = list(entries)
        self.save_count += 1
