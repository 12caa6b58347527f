"""Pytest fixtures for lazydata tests."""

from __future__ import annotations

import os
import sqlite3
import tempfile
from pathlib import Path

import pytest

# Stores resolve their default paths at import time; point them at a scratch dir first.
_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="lazydata-test-config-"))
os.environ.setdefault("LAZYDATA_CONFIG_DIR", str(_TEST_CONFIG_DIR))


@pytest.fixture(autouse=True)
def _reset_debug_state():
    """Keep debug events and the keymap provider from leaking between tests."""
    from lazydata.core.keymap import reset_keymap
    from lazydata.shared.core.debug_events import clear_debug_events

    clear_debug_events()
    reset_keymap()
    yield
    clear_debug_events()
    reset_keymap()


@pytest.fixture(scope="function")
def sqlite_db_path(tmp_path: Path) -> Path:
    """A SQLite file with a small schema: users, orders, a trigger and an index."""
    db_path = tmp_path / "test.db"
    conn = sqlite3.connect(db_path)
    conn.executescript(
        """
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT
        );
        CREATE TABLE orders (
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL,
            total REAL
        );
        CREATE INDEX idx_orders_user ON orders(user_id);
        CREATE TRIGGER orders_touch AFTER INSERT ON orders BEGIN SELECT 1; END;
        INSERT INTO users (name, email) VALUES ('Alice', 'alice@example.com');
        INSERT INTO users (name, email) VALUES ('Bob', NULL);
        INSERT INTO orders (user_id, total) VALUES (1, 9.5);
        """
    )
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def sqlite_config(sqlite_db_path: Path):
    from lazydata.domains.connections.domain.config import ConnectionConfig, DatabaseType

    return ConnectionConfig(name="local", host=str(sqlite_db_path), db_type=DatabaseType.SQLITE)
