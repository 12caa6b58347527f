"""Tests for the adapter registry and driver checks."""

from __future__ import annotations

import pytest

from lazydata.db.adapters.base import import_driver_module
from lazydata.db.adapters.mysql import MySQLAdapter
from lazydata.db.adapters.postgresql import PostgreSQLAdapter
from lazydata.db.adapters.sqlite import SQLiteAdapter
from lazydata.db.exceptions import MissingDriverError
from lazydata.db.providers import get_adapter, get_adapter_class, get_supported_db_types
from lazydata.domains.connections.domain.config import DatabaseType


class TestRegistry:
    def test_supported_types(self):
        assert get_supported_db_types() == ["PostgreSQL", "MySQL", "SQLite"]

    @pytest.mark.parametrize(
        "db_type,expected",
        [
            (DatabaseType.POSTGRESQL, PostgreSQLAdapter),
            ("mysql", MySQLAdapter),
            ("sqlite3", SQLiteAdapter),
        ],
    )
    def test_adapter_lookup(self, db_type, expected):
        assert get_adapter_class(db_type) is expected
        assert isinstance(get_adapter(db_type), expected)

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            get_adapter_class("oracle")


class AbsentDriverPostgreSQLAdapter(PostgreSQLAdapter):
    @property
    def driver_import_names(self) -> tuple[str, ...]:
        return ("lazydata_tests_absent_driver",)


class TestMissingDrivers:
    def test_missing_driver_names_install_extra(self):
        with pytest.raises(MissingDriverError, match=r"pip install 'lazydata\[postgres\]'"):
            AbsentDriverPostgreSQLAdapter().ensure_driver_available()

    def test_sqlite_driver_is_always_available(self):
        SQLiteAdapter().ensure_driver_available()

    def test_import_driver_module(self):
        with pytest.raises(MissingDriverError) as excinfo:
            import_driver_module(
                "lazydata_tests_absent_driver",
                driver_name="Absent",
                extra_name="absent",
                package_name="absent-driver",
            )
        assert excinfo.value.package_name == "absent-driver"
        assert "Absent driver not found" in str(excinfo.value)
