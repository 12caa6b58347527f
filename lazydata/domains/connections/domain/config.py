"""Connection domain models and enums."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class DatabaseType(str, Enum):
    POSTGRESQL = "PostgreSQL"
    MYSQL = "MySQL"
    SQLITE = "SQLite"

    @classmethod
    def parse(cls, value: str) -> DatabaseType:
        """Accept stored values as well as case-insensitive aliases."""
        normalized = value.strip().lower()
        aliases = {
            "postgresql": cls.POSTGRESQL,
            "postgres": cls.POSTGRESQL,
            "pg": cls.POSTGRESQL,
            "mysql": cls.MYSQL,
            "sqlite": cls.SQLITE,
            "sqlite3": cls.SQLITE,
        }
        if normalized in aliases:
            return aliases[normalized]
        valid = ", ".join(t.value for t in cls)
        raise ValueError(f"Invalid database type '{value}'. Valid types: {valid}")

    @property
    def is_file_based(self) -> bool:
        return self is DatabaseType.SQLITE


DEFAULT_PORTS: dict[DatabaseType, int] = {
    DatabaseType.POSTGRESQL: 5432,
    DatabaseType.MYSQL: 3306,
}


@dataclass
class ConnectionConfig:
    """A saved connection.

    ``host`` is the server host (optionally ``host:port``) for server
    backends and the database file path for SQLite.
    """

    name: str
    host: str
    user: str = ""
    password: str | None = None
    db_type: DatabaseType = DatabaseType.POSTGRESQL

    @property
    def hostname(self) -> str:
        host, _ = self._split_host()
        return host

    @property
    def port(self) -> int | None:
        if self.db_type.is_file_based:
            return None
        _, port = self._split_host()
        return port if port is not None else DEFAULT_PORTS.get(self.db_type)

    def _split_host(self) -> tuple[str, int | None]:
        if self.db_type.is_file_based:
            return self.host, None
        host, sep, port = self.host.rpartition(":")
        if sep and port.isdigit() and host:
            return host, int(port)
        return self.host, None

    @property
    def display_target(self) -> str:
        if self.db_type.is_file_based:
            return self.host
        return f"{self.user}@{self.host}" if self.user else self.host

    def to_dict(self, *, include_password: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "host": self.host,
            "user": self.user,
            "db_type": self.db_type.value,
        }
        if include_password and self.password is not None:
            data["password"] = self.password
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConnectionConfig:
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise KeyError("name")
        raw_type = data.get("db_type")
        db_type = DatabaseType.parse(raw_type) if isinstance(raw_type, str) and raw_type else DatabaseType.POSTGRESQL
        password = data.get("password")
        return cls(
            name=name,
            host=str(data.get("host", "") or ""),
            user=str(data.get("user", "") or ""),
            password=str(password) if password is not None else None,
            db_type=db_type,
        )
