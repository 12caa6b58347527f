"""Schema data access for the sidebar."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lazydata.shared.core.debug_events import emit_debug_event

if TYPE_CHECKING:
    from lazydata.db.adapters.base import TableMetadata
    from lazydata.db.executor import ConnectionSession


@dataclass
class SchemaService:
    """Lists databases and tables, and caches table metadata.

    Listing the tables of a database also makes it the session's active
    database, so queries typed afterwards run against it.
    """

    session: ConnectionSession
    metadata_cache: dict[tuple[str, str], TableMetadata] = field(default_factory=dict)

    def list_databases(self) -> list[str]:
        databases = self.session.get_databases()
        emit_debug_event("schema.databases", category="schema", count=len(databases))
        return databases

    def list_tables(self, database: str) -> list[str]:
        self.session.switch_database(database)
        tables = self.session.get_tables(database)
        emit_debug_event("schema.tables", category="schema", database=database, count=len(tables))
        return tables

    def get_table_metadata(self, database: str, table: str) -> TableMetadata:
        key = (database, table)
        cached = self.metadata_cache.get(key)
        if cached is not None:
            emit_debug_event("schema.metadata_cache_hit", category="schema", database=database, table=table)
            return cached
        self.session.switch_database(database)
        metadata = self.session.get_table_metadata(table, database)
        self.metadata_cache[key] = metadata
        emit_debug_event("schema.metadata", category="schema", database=database, table=table)
        return metadata
