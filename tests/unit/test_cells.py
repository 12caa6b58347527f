"""Tests for driver value coercion."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from lazydata.domains.results.domain.cells import (
    NULL_TEXT,
    CellKind,
    CellValue,
    coerce_cell,
    coerce_row,
    is_null_text,
)


class TestCoerceCell:
    def test_none_is_null(self):
        cell = coerce_cell(None)
        assert cell.kind is CellKind.NULL
        assert cell.display_text() == NULL_TEXT == "[null]"

    def test_bool_is_checked_before_int(self):
        assert coerce_cell(True).kind is CellKind.BOOLEAN
        assert coerce_cell(False).display_text() == "false"
        assert coerce_cell(7).kind is CellKind.INTEGER

    def test_numbers(self):
        assert coerce_cell(1.5).display_text() == "1.5"
        assert coerce_cell(Decimal("10.25")).display_text() == "10.25"

    def test_bytes_render_as_hex(self):
        assert coerce_cell(b"\x00\xff").display_text() == "00ff"
        assert coerce_cell(memoryview(b"ab")).display_text() == "6162"

    def test_structured_values_render_as_json(self):
        assert coerce_cell({"a": 1}).display_text() == '{"a": 1}'
        assert coerce_cell([1, "x"]).display_text() == '[1, "x"]'

    def test_temporal_and_uuid(self):
        assert coerce_cell(datetime(2024, 1, 2, 3, 4, 5)).display_text() == "2024-01-02 03:04:05"
        assert coerce_cell(date(2024, 1, 2)).display_text() == "2024-01-02"
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert coerce_cell(value).display_text() == str(value)

    def test_unknown_type_becomes_empty_text(self):
        assert coerce_cell(object()).display_text() == ""

    def test_cell_values_pass_through(self):
        cell = CellValue.text("x")
        assert coerce_cell(cell) is cell

    def test_coerce_row(self):
        assert [c.display_text() for c in coerce_row((1, None, "a"))] == ["1", "[null]", "a"]


class TestNullText:
    def test_is_null_text(self):
        assert is_null_text("[null]")
        assert is_null_text(" NULL ")
        assert not is_null_text("nullable")
