"""Adapter exports.

Driver modules are imported lazily inside each adapter's ``connect``.
"""

from __future__ import annotations

from .base import ColumnInfo, CursorBasedAdapter, DatabaseAdapter, TableMetadata
from .mysql import MySQLAdapter
from .postgresql import PostgreSQLAdapter
from .sqlite import SQLiteAdapter

__all__ = [
    "ColumnInfo",
    "CursorBasedAdapter",
    "DatabaseAdapter",
    "MySQLAdapter",
    "PostgreSQLAdapter",
    "SQLiteAdapter",
    "TableMetadata",
]
