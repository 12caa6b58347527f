"""Coarse statement classification by leading keyword."""

from __future__ import annotations

from enum import Enum


class StatementKind(Enum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    UNKNOWN = "UNKNOWN"


def leading_keyword(sql: str) -> str:
    parts = sql.strip().split(None, 1)
    return parts[0].upper() if parts else ""


def classify_statement(sql: str) -> StatementKind:
    """Classify ``sql`` as SELECT/INSERT/UPDATE/DELETE, anything else is UNKNOWN."""
    keyword = leading_keyword(sql)
    try:
        kind = StatementKind(keyword)
    except ValueError:
        return StatementKind.UNKNOWN
    return kind
