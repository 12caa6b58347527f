"""Statement execution against an open connection.

``Executor`` is the narrow seam the query pipeline talks to; tests supply
their own. ``ConnectionSession`` owns the live connection for the running
app and rebinds it when the active database changes.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

from lazydata.db.exceptions import DatabaseConnectionError, LazydataError, QueryError
from lazydata.shared.core.debug_events import emit_debug_event

if TYPE_CHECKING:
    from lazydata.db.adapters.base import DatabaseAdapter, TableMetadata
    from lazydata.domains.connections.domain.config import ConnectionConfig
    from lazydata.domains.results.domain.cells import CellValue


class Executor(Protocol):
    def fetch_all(self, sql: str) -> tuple[Sequence[str], Sequence[tuple[CellValue, ...]]]: ...

    def insert(self, sql: str) -> int: ...

    def update(self, sql: str) -> int: ...

    def delete(self, sql: str) -> int: ...


def _error_message(error: BaseException) -> str:
    message = str(error).strip()
    return message or error.__class__.__name__


class AdapterExecutor:
    """Runs statements through a ``DatabaseAdapter`` on one connection.

    Driver exceptions are re-raised as ``QueryError`` carrying the backend's
    message text unchanged.
    """

    def __init__(self, adapter: DatabaseAdapter, connection: Any) -> None:
        self.adapter = adapter
        self.connection = connection
        self.lock = threading.Lock()

    def fetch_all(self, sql: str) -> tuple[list[str], list[tuple[CellValue, ...]]]:
        with self.lock:
            try:
                columns, rows = self.adapter.execute_query(self.connection, sql)
            except LazydataError:
                raise
            except Exception as e:
                raise QueryError(_error_message(e), original=e) from e
        to_cell = self.adapter.to_cell
        return list(columns), [tuple(to_cell(value) for value in row) for row in rows]

    def _non_query(self, sql: str) -> int:
        with self.lock:
            try:
                return self.adapter.execute_non_query(self.connection, sql)
            except LazydataError:
                raise
            except Exception as e:
                raise QueryError(_error_message(e), original=e) from e

    def insert(self, sql: str) -> int:
        return self._non_query(sql)

    def update(self, sql: str) -> int:
        return self._non_query(sql)

    def delete(self, sql: str) -> int:
        return self._non_query(sql)


class ConnectionSession:
    """The live connection for one saved connection profile."""

    def __init__(self, config: ConnectionConfig, adapter: DatabaseAdapter) -> None:
        self.config = config
        self.adapter = adapter
        self.connection: Any = None
        self.database: str | None = None
        self._executor: AdapterExecutor | None = None

    @property
    def is_open(self) -> bool:
        return self.connection is not None

    @property
    def executor(self) -> AdapterExecutor:
        if self._executor is None:
            raise DatabaseConnectionError("Not connected")
        return self._executor

    def open(self, database: str | None = None) -> None:
        emit_debug_event(
            "connection.open",
            category="connection",
            connection=self.config.name,
            db_type=self.config.db_type.value,
            database=database,
        )
        self.adapter.ensure_driver_available()
        try:
            connection = self.adapter.connect(self.config, database)
        except LazydataError:
            raise
        except Exception as e:
            raise DatabaseConnectionError(_error_message(e)) from e
        self._bind(connection, database)

    def _bind(self, connection: Any, database: str | None) -> None:
        self.connection = connection
        self.database = database
        self._executor = AdapterExecutor(self.adapter, connection)

    def switch_database(self, database: str) -> None:
        """Make ``database`` the target of subsequent queries."""
        if not self.is_open:
            self.open(database)
            return
        if database == self.database:
            return
        emit_debug_event("connection.switch_database", category="connection", database=database)
        try:
            connection = self.adapter.switch_database(self.connection, self.config, database)
        except LazydataError:
            raise
        except Exception as e:
            raise DatabaseConnectionError(_error_message(e)) from e
        self._bind(connection, database)

    def get_databases(self) -> list[str]:
        return self._introspect(self.adapter.get_databases, self.connection)

    def get_tables(self, database: str | None = None) -> list[str]:
        return self._introspect(self.adapter.get_tables, self.connection, database)

    def get_table_metadata(self, table: str, database: str | None = None) -> TableMetadata:
        return self._introspect(self.adapter.get_table_metadata, self.connection, table, database)

    def _introspect(self, func: Any, *args: Any) -> Any:
        if not self.is_open:
            raise DatabaseConnectionError("Not connected")
        with self.executor.lock:
            try:
                return func(*args)
            except LazydataError:
                raise
            except Exception as e:
                raise QueryError(_error_message(e), original=e) from e

    def close(self) -> None:
        if self.connection is None:
            return
        try:
            self.adapter.close(self.connection)
        except Exception as e:
            emit_debug_event("connection.close_failed", category="connection", error=_error_message(e))
        self.connection = None
        self._executor = None
