"""Provider registry: maps each supported database type to its adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lazydata.domains.connections.domain.config import DatabaseType

from .adapters.mysql import MySQLAdapter
from .adapters.postgresql import PostgreSQLAdapter
from .adapters.sqlite import SQLiteAdapter

if TYPE_CHECKING:
    from .adapters.base import DatabaseAdapter


PROVIDERS: dict[DatabaseType, type[DatabaseAdapter]] = {
    DatabaseType.POSTGRESQL: PostgreSQLAdapter,
    DatabaseType.MYSQL: MySQLAdapter,
    DatabaseType.SQLITE: SQLiteAdapter,
}


def get_supported_db_types() -> list[str]:
    return [db_type.value for db_type in PROVIDERS]


def get_adapter_class(db_type: DatabaseType | str) -> type[DatabaseAdapter]:
    if isinstance(db_type, str) and not isinstance(db_type, DatabaseType):
        db_type = DatabaseType.parse(db_type)
    adapter_class = PROVIDERS.get(db_type)
    if adapter_class is None:
        raise ValueError(f"Unknown database type: {db_type}")
    return adapter_class


def get_adapter(db_type: DatabaseType | str) -> DatabaseAdapter:
    return get_adapter_class(db_type)()
