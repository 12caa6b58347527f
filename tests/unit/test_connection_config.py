"""Tests for connection configs and database types."""

from __future__ import annotations

import pytest

from lazydata.domains.connections.domain.config import ConnectionConfig, DatabaseType

from tests.helpers import make_config


class TestDatabaseType:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("PostgreSQL", DatabaseType.POSTGRESQL),
            ("postgres", DatabaseType.POSTGRESQL),
            (" pg ", DatabaseType.POSTGRESQL),
            ("MySQL", DatabaseType.MYSQL),
            ("sqlite3", DatabaseType.SQLITE),
        ],
    )
    def test_parse(self, raw, expected):
        assert DatabaseType.parse(raw) is expected

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="Valid types: PostgreSQL, MySQL, SQLite"):
            DatabaseType.parse("oracle")

    def test_only_sqlite_is_file_based(self):
        assert [t for t in DatabaseType if t.is_file_based] == [DatabaseType.SQLITE]


class TestConnectionConfig:
    def test_host_with_port(self):
        config = make_config(host="db.example.com:6543")
        assert config.hostname == "db.example.com"
        assert config.port == 6543

    def test_default_ports(self):
        assert make_config(host="db").port == 5432
        assert make_config(host="db", db_type=DatabaseType.MYSQL).port == 3306

    def test_sqlite_host_is_a_path(self):
        config = ConnectionConfig(name="f", host="C:/data/app.db", db_type=DatabaseType.SQLITE)
        assert config.hostname == "C:/data/app.db"
        assert config.port is None
        assert config.display_target == "C:/data/app.db"

    def test_display_target(self):
        assert make_config(user="admin", host="db").display_target == "admin@db"
        assert make_config(user="", host="db").display_target == "db"

    def test_to_dict_without_password(self):
        data = make_config("x").to_dict(include_password=False)
        assert "password" not in data

    def test_from_dict_defaults(self):
        config = ConnectionConfig.from_dict({"name": "x"})
        assert config.db_type is DatabaseType.POSTGRESQL
        assert config.host == ""
        assert config.password is None

    def test_from_dict_requires_name(self):
        with pytest.raises(KeyError):
            ConnectionConfig.from_dict({"name": ""})
