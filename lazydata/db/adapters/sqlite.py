"""SQLite adapter using the standard library driver."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

from lazydata.db.exceptions import DatabaseConnectionError

from .base import ColumnInfo, CursorBasedAdapter, TableMetadata, resolve_file_path

if TYPE_CHECKING:
    from lazydata.domains.connections.domain.config import ConnectionConfig

MAIN_DATABASE = "main"


class SQLiteAdapter(CursorBasedAdapter):
    """Adapter for SQLite files. ``config.host`` is the file path."""

    @property
    def name(self) -> str:
        return "SQLite"

    def connect(self, config: ConnectionConfig, database: str | None = None) -> Any:
        path = resolve_file_path(config.host)
        if not path.exists():
            raise DatabaseConnectionError(f"SQLite database file not found: {path}")
        try:
            # Queries run on a worker thread, schema reads on another.
            return sqlite3.connect(str(path), check_same_thread=False)
        except sqlite3.Error as e:
            raise DatabaseConnectionError(str(e)) from e

    def switch_database(self, conn: Any, config: ConnectionConfig, database: str) -> Any:
        return conn

    def get_databases(self, conn: Any) -> list[str]:
        return [MAIN_DATABASE]

    def get_tables(self, conn: Any, database: str | None = None) -> list[str]:
        return self._fetch_column(
            conn,
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name",
        )

    def get_table_metadata(self, conn: Any, table: str, database: str | None = None) -> TableMetadata:
        quoted = self.quote_identifier(table)
        cursor = conn.cursor()
        try:
            cursor.execute(f"PRAGMA table_info({quoted})")
            columns = [
                ColumnInfo(name=row[1], data_type=row[2] or "", is_primary_key=bool(row[5]))
                for row in cursor.fetchall()
            ]
            cursor.execute(f"PRAGMA index_list({quoted})")
            indexes = [row[1] for row in cursor.fetchall()]
            cursor.execute(f"SELECT COUNT(*) FROM {quoted}")
            row_count = int(cursor.fetchone()[0])
        finally:
            cursor.close()
        triggers = self._fetch_column(
            conn,
            "SELECT name FROM sqlite_master WHERE type = 'trigger' AND tbl_name = ? ORDER BY name",
            (table,),
        )
        return TableMetadata(
            name=table,
            columns=columns,
            indexes=indexes,
            triggers=triggers,
            row_count=row_count,
        )
