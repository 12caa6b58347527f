"""Base class and common types for database adapters."""

from __future__ import annotations

import importlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

from lazydata.db.exceptions import MissingDriverError
from lazydata.domains.results.domain.cells import CellValue, coerce_cell

if TYPE_CHECKING:
    from lazydata.domains.connections.domain.config import ConnectionConfig


def resolve_file_path(path_str: str) -> Path:
    """Resolve a file path for file-based databases (expands ``~``)."""
    return Path(path_str.strip()).expanduser().resolve()


def import_driver_module(module_name: str, *, driver_name: str, extra_name: str, package_name: str) -> ModuleType:
    """Import a driver lazily, turning ImportError into MissingDriverError."""
    try:
        return importlib.import_module(module_name)
    except ImportError as e:
        raise MissingDriverError(driver_name, extra_name, package_name) from e


@dataclass
class ColumnInfo:
    """Information about a database column."""

    name: str
    data_type: str
    is_primary_key: bool = False


@dataclass
class TableMetadata:
    """Details shown when a table node is expanded."""

    name: str
    columns: list[ColumnInfo] = field(default_factory=list)
    constraints: list[str] = field(default_factory=list)
    indexes: list[str] = field(default_factory=list)
    rls_policies: list[str] = field(default_factory=list)
    rules: list[str] = field(default_factory=list)
    triggers: list[str] = field(default_factory=list)
    row_count: int | None = None
    estimated_size: str = "N/A"
    table_type: str = "table"


class DatabaseAdapter(ABC):
    """Abstract base class for database adapters.

    Adapters handle connectivity, catalog introspection and raw statement
    execution for one backend. Row values leave the adapter as ``CellValue``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this database type."""

    @property
    def install_extra(self) -> str | None:
        """Name of the [extra] for pip install."""
        return None

    @property
    def install_package(self) -> str | None:
        return None

    @property
    def driver_import_names(self) -> tuple[str, ...]:
        """Import names used to verify required driver dependencies are installed."""
        return ()

    def ensure_driver_available(self) -> None:
        """Verify required dependencies can be imported, raising MissingDriverError if not."""
        for module_name in self.driver_import_names:
            if not self.install_extra or not self.install_package:
                importlib.import_module(module_name)
                continue
            import_driver_module(
                module_name,
                driver_name=self.name,
                extra_name=self.install_extra,
                package_name=self.install_package,
            )

    @abstractmethod
    def connect(self, config: ConnectionConfig, database: str | None = None) -> Any:
        """Open a connection, optionally bound to ``database``."""

    def switch_database(self, conn: Any, config: ConnectionConfig, database: str) -> Any:
        """Return a connection bound to ``database`` (reconnects by default)."""
        self.close(conn)
        return self.connect(config, database)

    def close(self, conn: Any) -> None:
        conn.close()

    @abstractmethod
    def get_databases(self, conn: Any) -> list[str]:
        """List databases visible to the connection."""

    @abstractmethod
    def get_tables(self, conn: Any, database: str | None = None) -> list[str]:
        """List table names in ``database``."""

    @abstractmethod
    def get_table_metadata(self, conn: Any, table: str, database: str | None = None) -> TableMetadata:
        """Fetch columns, indexes, triggers and size information for a table."""

    @abstractmethod
    def execute_query(self, conn: Any, query: str) -> tuple[list[str], list[tuple]]:
        """Run a row-returning statement and fetch every row."""

    @abstractmethod
    def execute_non_query(self, conn: Any, query: str) -> int:
        """Run a mutating statement and return the affected row count."""

    def to_cell(self, value: Any) -> CellValue:
        """Convert one driver value into a ``CellValue``."""
        return coerce_cell(value)

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'


class CursorBasedAdapter(DatabaseAdapter):
    """Base class for DB-API adapters using cursor-based execution."""

    def execute_query(self, conn: Any, query: str) -> tuple[list[str], list[tuple]]:
        cursor = conn.cursor()
        try:
            cursor.execute(query)
            if not cursor.description:
                return [], []
            columns = [col[0] for col in cursor.description]
            return columns, [tuple(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def execute_non_query(self, conn: Any, query: str) -> int:
        cursor = conn.cursor()
        try:
            cursor.execute(query)
            rowcount = int(cursor.rowcount)
        finally:
            cursor.close()
        conn.commit()
        return max(rowcount, 0)

    def _fetch_column(self, conn: Any, query: str, params: tuple = ()) -> list[Any]:
        cursor = conn.cursor()
        try:
            cursor.execute(query, params)
            return [row[0] for row in cursor.fetchall()]
        finally:
            cursor.close()
