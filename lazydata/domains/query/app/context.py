"""Application context: most-recent query statistics and the history log."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass

from lazydata.domains.query.store.history import QueryHistoryEntry, filter_for_connection


@dataclass(frozen=True)
class QueryStats:
    rows: int
    elapsed_ms: int


class AppContext:
    """Single owner of the shared query state.

    Queries run on a worker thread while the UI reads history, so every access
    goes through one lock.
    """

    def __init__(self, history: Iterable[QueryHistoryEntry] = (), *, history_limit: int | None = None) -> None:
        self._lock = threading.RLock()
        self._history: list[QueryHistoryEntry] = list(history)
        self._stats: QueryStats | None = None
        self._history_limit = history_limit

    @property
    def stats(self) -> QueryStats | None:
        with self._lock:
            return self._stats

    def record_stats(self, rows: int, elapsed_ms: int) -> None:
        with self._lock:
            self._stats = QueryStats(rows=rows, elapsed_ms=elapsed_ms)

    def append_history(self, entry: QueryHistoryEntry) -> None:
        with self._lock:
            self._history.append(entry)
            if self._history_limit is not None and len(self._history) > self._history_limit:
                del self._history[: len(self._history) - self._history_limit]

    def history(self) -> list[QueryHistoryEntry]:
        with self._lock:
            return list(self._history)

    def history_for(self, connection_name: str | None) -> list[QueryHistoryEntry]:
        with self._lock:
            return filter_for_connection(self._history, connection_name)
