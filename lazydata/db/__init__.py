"""Database abstraction layer for lazydata."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

from .exceptions import (
    DatabaseConnectionError,
    LazydataError,
    MissingDriverError,
    QueryError,
    UnsupportedStatementError,
)

__all__ = [
    # Errors
    "DatabaseConnectionError",
    "LazydataError",
    "MissingDriverError",
    "QueryError",
    "UnsupportedStatementError",
    # Lazy via __getattr__
    "AdapterExecutor",
    "ColumnInfo",
    "ConnectionSession",
    "DatabaseAdapter",
    "TableMetadata",
    "get_adapter",
    "get_supported_db_types",
]

if TYPE_CHECKING:
    from .adapters.base import ColumnInfo, DatabaseAdapter, TableMetadata
    from .executor import AdapterExecutor, ConnectionSession
    from .providers import get_adapter, get_supported_db_types


_LAZY_ATTRS: dict[str, tuple[str, str]] = {
    "AdapterExecutor": ("lazydata.db.executor", "AdapterExecutor"),
    "ConnectionSession": ("lazydata.db.executor", "ConnectionSession"),
    "ColumnInfo": ("lazydata.db.adapters.base", "ColumnInfo"),
    "DatabaseAdapter": ("lazydata.db.adapters.base", "DatabaseAdapter"),
    "TableMetadata": ("lazydata.db.adapters.base", "TableMetadata"),
    "get_adapter": ("lazydata.db.providers", "get_adapter"),
    "get_supported_db_types": ("lazydata.db.providers", "get_supported_db_types"),
}


def __getattr__(name: str) -> Any:
    target = _LAZY_ATTRS.get(name)
    if target is None:
        raise AttributeError(name)
    module_name, attr_name = target
    module = import_module(module_name)
    return getattr(module, attr_name)
