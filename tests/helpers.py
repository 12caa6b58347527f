"""Test helpers: fake executors and adapters, and builders for common objects."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from lazydata.core.commands import Command, CommandKind
from lazydata.db.adapters.base import ColumnInfo, DatabaseAdapter, TableMetadata
from lazydata.db.exceptions import ClipboardError, QueryError
from lazydata.domains.connections.domain.config import ConnectionConfig, DatabaseType
from lazydata.domains.query.store.history import QueryHistoryEntry
from lazydata.domains.results.app.table_model import ResultTableModel
from lazydata.domains.results.domain.cells import CellValue, coerce_row


def make_config(name: str = "test", **overrides: Any) -> ConnectionConfig:
    data: dict[str, Any] = {
        "name": name,
        "host": "localhost",
        "user": "postgres",
        "password": "secret",
        "db_type": DatabaseType.POSTGRESQL,
    }
    data.update(overrides)
    return ConnectionConfig(**data)


def make_history_entry(
    query: str = "SELECT 1",
    connection_name: str | None = "test",
    *,
    success: bool = True,
    rows: int = 1,
    elapsed_ms: int = 3,
    timestamp: str = "2024-01-01T12:00:00+00:00",
) -> QueryHistoryEntry:
    return QueryHistoryEntry(
        query=query,
        connection_name=connection_name,
        timestamp=timestamp,
        success=success,
        rows_affected=rows,
        execution_time_ms=elapsed_ms,
    )


def make_rows(count: int, columns: int = 2) -> list[tuple[Any, ...]]:
    return [tuple(f"r{row}c{col}" for col in range(columns)) for row in range(count)]


def make_table_model(
    headers: Sequence[str] = ("id", "name"),
    rows: Sequence[Sequence[Any]] | None = None,
    *,
    page_size: int = 100,
    clipboard: Any = None,
) -> ResultTableModel:
    model = ResultTableModel(page_size=page_size, clipboard=clipboard)
    model.finish_loading(headers, rows if rows is not None else [(1, "Alice"), (2, "Bob")], 5)
    return model


class MemoryClipboard:
    """Clipboard that remembers every copied text."""

    def __init__(self) -> None:
        self.text: str | None = None
        self.history: list[str] = []

    def set_text(self, text: str) -> None:
        self.text = text
        self.history.append(text)


class FailingClipboard:
    def set_text(self, text: str) -> None:
        raise ClipboardError("clipboard unavailable")


def cmd(kind: CommandKind, payload: Any = None) -> Command:
    return Command(kind, payload)


class FakeExecutor:
    """Executor returning canned results and recording every statement."""

    def __init__(
        self,
        columns: Sequence[str] = ("id",),
        rows: Sequence[Sequence[Any]] = ((1,),),
        *,
        affected: int = 1,
        error: str | None = None,
    ) -> None:
        self.columns = list(columns)
        self.rows = [coerce_row(row) for row in rows]
        self.affected = affected
        self.error = error
        self.statements: list[tuple[str, str]] = []

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise QueryError(self.error)

    def fetch_all(self, sql: str) -> tuple[list[str], list[tuple[CellValue, ...]]]:
        self.statements.append(("select", sql))
        self._maybe_fail()
        return self.columns, self.rows

    def insert(self, sql: str) -> int:
        self.statements.append(("insert", sql))
        self._maybe_fail()
        return self.affected

    def update(self, sql: str) -> int:
        self.statements.append(("update", sql))
        self._maybe_fail()
        return self.affected

    def delete(self, sql: str) -> int:
        self.statements.append(("delete", sql))
        self._maybe_fail()
        return self.affected


class FakeConnection:
    def __init__(self, database: str | None) -> None:
        self.database = database
        self.closed = False


class FakeAdapter(DatabaseAdapter):
    """In-memory adapter serving a fixed catalog.

    ``catalog`` maps database name to table name to a list of row dicts.
    """

    def __init__(
        self,
        catalog: dict[str, dict[str, list[dict[str, Any]]]] | None = None,
        *,
        connect_error: Exception | None = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else {
            "app": {"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]},
            "analytics": {},
        }
        self.connect_error = connect_error
        self.connections: list[FakeConnection] = []
        self.metadata_calls: list[tuple[str | None, str]] = []

    @property
    def name(self) -> str:
        return "Fake"

    def connect(self, config: ConnectionConfig, database: str | None = None) -> Any:
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakeConnection(database)
        self.connections.append(conn)
        return conn

    def close(self, conn: Any) -> None:
        conn.closed = True

    def get_databases(self, conn: Any) -> list[str]:
        return list(self.catalog)

    def get_tables(self, conn: Any, database: str | None = None) -> list[str]:
        return sorted(self.catalog.get(database or conn.database or "", {}))

    def get_table_metadata(self, conn: Any, table: str, database: str | None = None) -> TableMetadata:
        self.metadata_calls.append((database, table))
        rows = self.catalog.get(database or "", {}).get(table, [])
        columns = [ColumnInfo(name, "text") for name in (rows[0] if rows else {})]
        return TableMetadata(name=table, columns=columns, row_count=len(rows))

    def execute_query(self, conn: Any, query: str) -> tuple[list[str], list[tuple]]:
        table = query.rstrip(";").split()[-1]
        rows = self.catalog.get(conn.database or "", {}).get(table)
        if rows is None:
            raise RuntimeError(f'relation "{table}" does not exist')
        columns = list(rows[0]) if rows else []
        return columns, [tuple(row.values()) for row in rows]

    def execute_non_query(self, conn: Any, query: str) -> int:
        return 1


def build_test_services(
    *,
    connections: Sequence[ConnectionConfig] = (),
    history: Sequence[QueryHistoryEntry] = (),
    adapter: DatabaseAdapter | None = None,
    clipboard: Any = None,
):
    """AppServices wired with in-memory stores and a fake adapter."""
    from lazydata.domains.connections.store.memory import InMemoryConnectionStore
    from lazydata.domains.query.store.memory import InMemoryHistoryStore
    from lazydata.shared.app import RuntimeConfig, build_app_services

    fake = adapter or FakeAdapter()
    return build_app_services(
        RuntimeConfig(),
        connection_store=InMemoryConnectionStore(connections),
        history_store=InMemoryHistoryStore(history),
        clipboard=clipboard or MemoryClipboard(),
        adapter_factory=lambda _db_type: fake,
    )
