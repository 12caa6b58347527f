"""Cell values and the coercion of driver values into display text.

Drivers hand back whatever native types they like (psycopg2 returns ``dict``
for json columns and ``memoryview`` for bytea, sqlite3 returns ``bytes``,
PyMySQL returns ``Decimal`` ...). ``coerce_cell`` runs an ordered cascade of
typed extractions over a raw value and produces a ``CellValue``; the UI only
ever calls ``CellValue.display_text``.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

NULL_TEXT = "[null]"


class CellKind(Enum):
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    UUID = "uuid"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    NULL = "null"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class CellValue:
    kind: CellKind
    value: Any = None

    def display_text(self) -> str:
        return coerce_to_text(self)

    @classmethod
    def text(cls, value: str) -> CellValue:
        return cls(CellKind.TEXT, value)

    @classmethod
    def null(cls) -> CellValue:
        return cls(CellKind.NULL)


EMPTY_CELL = CellValue.text("")


def coerce_to_text(cell: CellValue) -> str:
    """The single conversion from a cell to the text shown and copied."""
    kind, value = cell.kind, cell.value
    if kind is CellKind.NULL:
        return NULL_TEXT
    if kind is CellKind.TEXT:
        return value
    if kind is CellKind.BOOLEAN:
        return "true" if value else "false"
    if kind is CellKind.TIMESTAMP:
        if isinstance(value, datetime):
            return value.isoformat(sep=" ")
        if isinstance(value, (date, time)):
            return value.isoformat()
        return str(value)
    if kind is CellKind.BINARY:
        return bytes(value).hex()
    if kind is CellKind.STRUCTURED:
        return json.dumps(value, ensure_ascii=False, default=_json_scalar)
    return str(value)


def _json_scalar(value: Any) -> Any:
    # Only the scalar types the cascade itself understands may nest inside JSON.
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, uuid.UUID, timedelta)):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _extract_text(raw: Any) -> CellValue | None:
    return CellValue(CellKind.TEXT, raw) if isinstance(raw, str) else None


def _extract_boolean(raw: Any) -> CellValue | None:
    # Must run before the integer extraction: bool is an int subclass.
    return CellValue(CellKind.BOOLEAN, raw) if isinstance(raw, bool) else None


def _extract_integer(raw: Any) -> CellValue | None:
    return CellValue(CellKind.INTEGER, raw) if isinstance(raw, int) else None


def _extract_float(raw: Any) -> CellValue | None:
    return CellValue(CellKind.FLOAT, raw) if isinstance(raw, (float, Decimal)) else None


def _extract_uuid(raw: Any) -> CellValue | None:
    return CellValue(CellKind.UUID, raw) if isinstance(raw, uuid.UUID) else None


def _extract_timestamp(raw: Any) -> CellValue | None:
    if isinstance(raw, (datetime, date, time, timedelta)):
        return CellValue(CellKind.TIMESTAMP, raw)
    return None


def _extract_structured(raw: Any) -> CellValue | None:
    if not isinstance(raw, (dict, list, tuple)):
        return None
    try:
        json.dumps(raw, default=_json_scalar)
    except (TypeError, ValueError):
        return None
    return CellValue(CellKind.STRUCTURED, raw)


def _extract_binary(raw: Any) -> CellValue | None:
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return CellValue(CellKind.BINARY, bytes(raw))
    return None


CellExtractor = Callable[[Any], "CellValue | None"]

EXTRACTION_CASCADE: tuple[CellExtractor, ...] = (
    _extract_text,
    _extract_boolean,
    _extract_integer,
    _extract_float,
    _extract_uuid,
    _extract_timestamp,
    _extract_structured,
    _extract_binary,
)


def coerce_cell(raw: Any) -> CellValue:
    """Turn a driver value into a ``CellValue``; unknown types become empty text."""
    if raw is None:
        return CellValue.null()
    if isinstance(raw, CellValue):
        return raw
    for extract in EXTRACTION_CASCADE:
        cell = extract(raw)
        if cell is not None:
            return cell
    return EMPTY_CELL


def coerce_row(raw_row: Sequence[Any]) -> tuple[CellValue, ...]:
    return tuple(coerce_cell(value) for value in raw_row)


def is_null_text(text: str) -> bool:
    return text.strip().lower() in ("null", NULL_TEXT)
