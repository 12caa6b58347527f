"""MySQL adapter using PyMySQL (pure Python)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lazydata.db.exceptions import DatabaseConnectionError

from .base import ColumnInfo, CursorBasedAdapter, TableMetadata, import_driver_module

if TYPE_CHECKING:
    from lazydata.domains.connections.domain.config import ConnectionConfig

SYSTEM_DATABASES = frozenset({"information_schema", "mysql", "performance_schema", "sys"})


class MySQLAdapter(CursorBasedAdapter):
    """Adapter for MySQL using PyMySQL."""

    @property
    def name(self) -> str:
        return "MySQL"

    @property
    def install_extra(self) -> str:
        return "mysql"

    @property
    def install_package(self) -> str:
        return "PyMySQL"

    @property
    def driver_import_names(self) -> tuple[str, ...]:
        return ("pymysql",)

    def connect(self, config: ConnectionConfig, database: str | None = None) -> Any:
        pymysql = import_driver_module(
            "pymysql",
            driver_name=self.name,
            extra_name=self.install_extra,
            package_name=self.install_package,
        )
        # PyMySQL resolves 'localhost' to ::1 (IPv6) which often fails.
        host = config.hostname
        if host and host.lower() == "localhost":
            host = "127.0.0.1"
        try:
            return pymysql.connect(
                host=host,
                port=config.port,
                database=database or None,
                user=config.user,
                password=config.password or "",
                connect_timeout=10,
                autocommit=True,
                charset="utf8mb4",
            )
        except pymysql.MySQLError as e:
            raise DatabaseConnectionError(str(e)) from e

    def switch_database(self, conn: Any, config: ConnectionConfig, database: str) -> Any:
        conn.select_db(database)
        return conn

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def get_databases(self, conn: Any) -> list[str]:
        names = self._fetch_column(conn, "SHOW DATABASES")
        return [name for name in names if name not in SYSTEM_DATABASES]

    def get_tables(self, conn: Any, database: str | None = None) -> list[str]:
        if database:
            return self._fetch_column(
                conn,
                "SELECT table_name FROM information_schema.tables "
                "WHERE table_schema = %s ORDER BY table_name ASC",
                (database,),
            )
        return self._fetch_column(
            conn,
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = DATABASE() ORDER BY table_name ASC",
        )

    def get_table_metadata(self, conn: Any, table: str, database: str | None = None) -> TableMetadata:
        cursor = conn.cursor()
        try:
            cursor.execute("SHOW TABLE STATUS WHERE Name = %s", (table,))
            status = cursor.fetchone()
            status_columns = [col[0] for col in cursor.description or ()]
            cursor.execute(f"SHOW COLUMNS FROM {self.quote_identifier(table)}")
            columns = [
                ColumnInfo(name=row[0], data_type=str(row[1]), is_primary_key=row[3] == "PRI")
                for row in cursor.fetchall()
            ]
            cursor.execute("SHOW TRIGGERS WHERE `Table` = %s", (table,))
            triggers = [row[0] for row in cursor.fetchall()]
        finally:
            cursor.close()

        metadata = TableMetadata(name=table, columns=columns, triggers=triggers)
        if status is not None:
            fields = dict(zip(status_columns, status))
            metadata.row_count = int(fields.get("Rows") or 0)
            size = int(fields.get("Data_length") or 0) + int(fields.get("Index_length") or 0)
            metadata.estimated_size = f"{size} bytes"
            metadata.table_type = fields.get("Comment") or ""
        return metadata
