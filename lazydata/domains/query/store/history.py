"""Query history records and their JSON file store."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from lazydata.shared.core.debug_events import emit_debug_event
from lazydata.shared.core.store import CONFIG_DIR, JSONFileStore


@dataclass(frozen=True)
class QueryHistoryEntry:
    """One attempted query. Entries are never modified after creation."""

    query: str
    connection_name: str | None
    timestamp: str
    success: bool
    rows_affected: int
    execution_time_ms: int

    @classmethod
    def create(
        cls,
        query: str,
        connection_name: str | None,
        *,
        success: bool,
        rows_affected: int,
        execution_time_ms: int,
        now: datetime | None = None,
    ) -> QueryHistoryEntry:
        stamp = (now or datetime.now(timezone.utc)).isoformat(timespec="seconds")
        return cls(
            query=query,
            connection_name=connection_name,
            timestamp=stamp,
            success=success,
            rows_affected=max(0, rows_affected),
            execution_time_ms=max(0, execution_time_ms),
        )

    @property
    def display_timestamp(self) -> str:
        try:
            parsed = datetime.fromisoformat(self.timestamp)
        except ValueError:
            return self.timestamp
        return parsed.strftime("%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "connection_name": self.connection_name,
            "timestamp": self.timestamp,
            "success": self.success,
            "rows_affected": self.rows_affected,
            "execution_time": self.execution_time_ms,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QueryHistoryEntry:
        connection_name = data.get("connection_name")
        return cls(
            query=str(data["query"]),
            connection_name=str(connection_name) if connection_name is not None else None,
            timestamp=str(data.get("timestamp", "")),
            success=bool(data.get("success", True)),
            rows_affected=int(data.get("rows_affected", 0) or 0),
            execution_time_ms=int(data.get("execution_time", 0) or 0),
        )


def filter_for_connection(entries: Iterable[QueryHistoryEntry], connection_name: str | None) -> list[QueryHistoryEntry]:
    return [entry for entry in entries if entry.connection_name == connection_name]


class HistoryStore(JSONFileStore):
    """Query history in ``history.json``: loaded at startup, saved at shutdown."""

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or CONFIG_DIR / "history.json")

    def load_all(self) -> list[QueryHistoryEntry]:
        data = self._read_json()
        if data is None:
            return []
        if not isinstance(data, list):
            emit_debug_event("history.invalid_payload", category="persistence", path=str(self.file_path))
            return []
        entries: list[QueryHistoryEntry] = []
        for raw in data:
            if not isinstance(raw, dict):
                continue
            try:
                entries.append(QueryHistoryEntry.from_dict(raw))
            except (KeyError, TypeError, ValueError) as exc:
                emit_debug_event("history.skip_record", category="persistence", reason=str(exc))
        return entries

    def save_all(self, entries: Iterable[QueryHistoryEntry]) -> None:
        self._write_json([entry.to_dict() for entry in entries])
