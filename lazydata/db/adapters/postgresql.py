"""PostgreSQL adapter using psycopg2."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lazydata.db.exceptions import DatabaseConnectionError

from .base import ColumnInfo, CursorBasedAdapter, TableMetadata, import_driver_module

if TYPE_CHECKING:
    from lazydata.domains.connections.domain.config import ConnectionConfig

DEFAULT_DATABASE = "postgres"

_TABLE_SUMMARY_QUERY = """
    SELECT
        c.relname,
        CASE WHEN c.reltuples < 0 THEN 0 ELSE c.reltuples::BIGINT END,
        pg_size_pretty(pg_total_relation_size(c.oid)),
        CASE c.relkind
            WHEN 'r' THEN 'table'
            WHEN 'v' THEN 'view'
            WHEN 'm' THEN 'materialized view'
            WHEN 'f' THEN 'foreign table'
            ELSE 'other'
        END
    FROM pg_class c
    JOIN pg_namespace n ON n.oid = c.relnamespace
    WHERE n.nspname = 'public' AND c.relkind IN ('r', 'v', 'm', 'f') AND c.relname = %s
"""


class PostgreSQLAdapter(CursorBasedAdapter):
    """Adapter for PostgreSQL using psycopg2."""

    @property
    def name(self) -> str:
        return "PostgreSQL"

    @property
    def install_extra(self) -> str:
        return "postgres"

    @property
    def install_package(self) -> str:
        return "psycopg2-binary"

    @property
    def driver_import_names(self) -> tuple[str, ...]:
        return ("psycopg2",)

    def connect(self, config: ConnectionConfig, database: str | None = None) -> Any:
        psycopg2 = import_driver_module(
            "psycopg2",
            driver_name=self.name,
            extra_name=self.install_extra,
            package_name=self.install_package,
        )
        try:
            conn = psycopg2.connect(
                host=config.hostname,
                port=config.port,
                dbname=database or DEFAULT_DATABASE,
                user=config.user,
                password=config.password,
                connect_timeout=10,
            )
        except psycopg2.Error as e:
            raise DatabaseConnectionError(str(e).strip()) from e
        # Each statement commits on its own; there is no transaction UI.
        conn.autocommit = True
        return conn

    def get_databases(self, conn: Any) -> list[str]:
        return self._fetch_column(
            conn, "SELECT datname FROM pg_database WHERE datistemplate = false ORDER BY datname"
        )

    def get_tables(self, conn: Any, database: str | None = None) -> list[str]:
        return self._fetch_column(
            conn,
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = 'public' ORDER BY table_name ASC",
        )

    def get_table_metadata(self, conn: Any, table: str, database: str | None = None) -> TableMetadata:
        cursor = conn.cursor()
        try:
            cursor.execute(_TABLE_SUMMARY_QUERY, (table,))
            summary = cursor.fetchone()
            cursor.execute(
                "SELECT column_name, data_type FROM information_schema.columns "
                "WHERE table_schema = 'public' AND table_name = %s ORDER BY ordinal_position",
                (table,),
            )
            columns = [ColumnInfo(name=row[0], data_type=row[1]) for row in cursor.fetchall()]
        finally:
            cursor.close()

        metadata = TableMetadata(
            name=table,
            columns=columns,
            constraints=self._fetch_column(
                conn,
                "SELECT constraint_name FROM information_schema.table_constraints "
                "WHERE table_name = %s AND constraint_type != 'CHECK'",
                (table,),
            ),
            indexes=self._fetch_column(conn, "SELECT indexname FROM pg_indexes WHERE tablename = %s", (table,)),
            rls_policies=self._fetch_column(
                conn, "SELECT policyname FROM pg_policies WHERE tablename = %s", (table,)
            ),
            rules=self._fetch_column(conn, "SELECT rulename FROM pg_rules WHERE tablename = %s", (table,)),
            triggers=self._fetch_column(
                conn,
                "SELECT tgname FROM pg_trigger JOIN pg_class ON tgrelid = pg_class.oid "
                "WHERE relname = %s AND NOT tgisinternal",
                (table,),
            ),
        )
        if summary is not None:
            metadata.row_count = int(summary[1])
            metadata.estimated_size = summary[2]
            metadata.table_type = summary[3]
        return metadata
