"""Paginated result table model.

The model owns everything the results panel shows: the current result set,
pagination, selection, horizontal scroll, per-column widths, the color
palette, the tab strip and the loading state. The widget only renders it.

Selection is page-relative. Displayed column 0 is a synthetic row-number
column; displayed column ``c > 0`` maps to data column
``c - 1 + horizontal_scroll``.
"""

from __future__ import annotations

import json
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rich.cells import cell_len

from lazydata.core.commands import Command, CommandKind
from lazydata.db.exceptions import ClipboardError
from lazydata.domains.query.store.history import QueryHistoryEntry
from lazydata.domains.results.domain.cells import CellValue, coerce_row, is_null_text
from lazydata.shared.core.debug_events import emit_debug_event
from lazydata.shared.ui.clipboard import Clipboard

PAGE_SIZE = 100
WIDTH_SAMPLE_ROWS = 100
COLUMN_PADDING = 2
MIN_COLUMN_WIDTH = 3

DATA_TAB = 0
MESSAGES_TAB = 1
HISTORY_TAB = 2
TAB_TITLES: tuple[str, ...] = ("Data Output", "Messages", "Query History")
HISTORY_HEADERS: tuple[str, ...] = ("Query", "Timestamp", "Status", "Rows", "Time (ms)")


@dataclass(frozen=True)
class TablePalette:
    name: str
    header_bg: str
    header_fg: str
    row_fg: str
    selected_fg: str
    alt_row_bg: str


PALETTES: tuple[TablePalette, ...] = (
    TablePalette("blue", "#1e3a8a", "#e2e8f0", "#e2e8f0", "#60a5fa", "#111827"),
    TablePalette("emerald", "#064e3b", "#e2e8f0", "#e2e8f0", "#34d399", "#0f1f1a"),
    TablePalette("indigo", "#312e81", "#e2e8f0", "#e2e8f0", "#818cf8", "#15132b"),
    TablePalette("red", "#7f1d1d", "#e2e8f0", "#e2e8f0", "#f87171", "#1f1111"),
)


class LoadingKind(Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class LoadingState:
    kind: LoadingKind = LoadingKind.IDLE
    message: str | None = None

    @classmethod
    def idle(cls) -> LoadingState:
        return cls(LoadingKind.IDLE)

    @classmethod
    def loading(cls) -> LoadingState:
        return cls(LoadingKind.LOADING)

    @classmethod
    def error(cls, message: str) -> LoadingState:
        return cls(LoadingKind.ERROR, message)


@dataclass
class TabStrip:
    titles: list[str] = field(default_factory=lambda: list(TAB_TITLES))
    index: int = 0

    def next(self) -> None:
        self.index = (self.index + 1) % len(self.titles)

    def previous(self) -> None:
        self.index = (self.index - 1) % len(self.titles)

    def set_index(self, index: int) -> bool:
        if 0 <= index < len(self.titles):
            self.index = index
            return True
        return False

    @property
    def title(self) -> str:
        return self.titles[self.index]


def calculate_column_widths(headers: Sequence[str], rows: Sequence[Sequence[CellValue]]) -> list[int]:
    """Baseline width per column: widest of header and sampled values, padded, floored."""
    widths = [cell_len(header) for header in headers]
    for row in rows[:WIDTH_SAMPLE_ROWS]:
        for index, cell in enumerate(row[: len(widths)]):
            widths[index] = max(widths[index], cell_len(cell.display_text()))
    return [max(width + COLUMN_PADDING, MIN_COLUMN_WIDTH) for width in widths]


class ResultTableModel:
    """State behind the results panel."""

    def __init__(self, *, page_size: int = PAGE_SIZE, clipboard: Clipboard | None = None) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self.clipboard = clipboard
        self.headers: list[str] = []
        self.rows: list[tuple[CellValue, ...]] = []
        self.elapsed_ms: int | None = None
        self.column_widths: list[int] = []
        self.min_column_widths: list[int] = []
        self.current_page = 0
        self.selected_row: int | None = None
        self.selected_column: int | None = None
        self.horizontal_scroll = 0
        self.history: list[QueryHistoryEntry] = []
        self.history_selected: int | None = None
        self.color_index = 0
        self.tabs = TabStrip()
        self.status_message: str | None = None
        self.message = ""
        self.loading_state = LoadingState.idle()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.rows

    @property
    def total_pages(self) -> int:
        if not self.rows:
            return 1
        return math.ceil(len(self.rows) / self.page_size)

    @property
    def palette(self) -> TablePalette:
        return PALETTES[self.color_index]

    @property
    def is_loading(self) -> bool:
        return self.loading_state.kind is LoadingKind.LOADING

    def page_rows(self) -> list[tuple[CellValue, ...]]:
        start = self.current_page * self.page_size
        return self.rows[start : start + self.page_size]

    def page_rows_text(self) -> list[list[str]]:
        return [[cell.display_text() for cell in row] for row in self.page_rows()]

    def visible_columns(self) -> list[tuple[int, str, int]]:
        """``(data_index, header, width)`` for columns right of the scroll offset."""
        return [
            (index, self.headers[index], self.column_widths[index])
            for index in range(self.horizontal_scroll, len(self.headers))
        ]

    def selected_absolute_row(self) -> int | None:
        if self.selected_row is None or not self.rows:
            return None
        absolute = self.current_page * self.page_size + self.selected_row
        return absolute if absolute < len(self.rows) else None

    def selected_data_column(self) -> int | None:
        """Data column under the cursor; None for the row-number column."""
        if self.selected_column is None or self.selected_column == 0:
            return None
        column = self.selected_column - 1 + self.horizontal_scroll
        return column if 0 <= column < len(self.headers) else None

    def info_line(self) -> str:
        elapsed = self.elapsed_ms if self.elapsed_ms is not None else 0
        return (
            f"Total Rows: {self.row_count} | Query Complete: {elapsed} ms | "
            f"Page: {self.current_page + 1}/{self.total_pages}"
        )

    def history_rows_text(self) -> list[list[str]]:
        """History rows, newest first."""
        return [
            [
                entry.query,
                entry.display_timestamp,
                "OK" if entry.success else "Error",
                str(entry.rows_affected),
                str(entry.execution_time_ms),
            ]
            for entry in reversed(self.history)
        ]

    # ------------------------------------------------------------------
    # Row selection (wraps within the page)
    # ------------------------------------------------------------------

    def next_row(self) -> None:
        count = len(self.page_rows())
        if count == 0:
            return
        if self.selected_row is None or self.selected_row >= count - 1:
            self.selected_row = 0
        else:
            self.selected_row += 1

    def previous_row(self) -> None:
        count = len(self.page_rows())
        if count == 0:
            return
        if self.selected_row is None or self.selected_row == 0:
            self.selected_row = count - 1
        else:
            self.selected_row = min(self.selected_row - 1, count - 1)

    def next_history_row(self) -> None:
        if not self.history:
            return
        if self.history_selected is None:
            self.history_selected = 0
        else:
            self.history_selected = (self.history_selected + 1) % len(self.history)

    def previous_history_row(self) -> None:
        if not self.history:
            return
        # An unselected history behaves like row 0, so "previous" wraps to the oldest entry.
        current = self.history_selected or 0
        self.history_selected = (current - 1) % len(self.history)

    # ------------------------------------------------------------------
    # Columns and horizontal scroll
    # ------------------------------------------------------------------

    def _max_displayed_column(self) -> int:
        return max(0, len(self.headers) - self.horizontal_scroll)

    def next_column(self) -> None:
        if not self.headers:
            return
        if self.selected_column is None:
            self.selected_column = 0
        else:
            self.selected_column = min(self.selected_column + 1, self._max_displayed_column())

    def previous_column(self) -> None:
        if not self.headers:
            return
        if self.selected_column is None:
            self.selected_column = 0
        else:
            self.selected_column = max(self.selected_column - 1, 0)

    def scroll_right(self) -> None:
        if self.horizontal_scroll < max(0, len(self.column_widths) - 1):
            self.horizontal_scroll += 1
            if self.selected_column is not None:
                self.selected_column = min(self.selected_column, self._max_displayed_column())

    def scroll_left(self) -> None:
        if self.horizontal_scroll > 0:
            self.horizontal_scroll -= 1

    def adjust_column_width(self, delta: int) -> None:
        column = self.selected_data_column()
        if column is None:
            return
        width = self.column_widths[column] + delta
        self.column_widths[column] = max(width, self.min_column_widths[column])

    # ------------------------------------------------------------------
    # Pagination (clamped)
    # ------------------------------------------------------------------

    def next_page(self) -> None:
        if self.current_page + 1 < self.total_pages:
            self.current_page += 1
            self.selected_row = 0 if self.page_rows() else None

    def previous_page(self) -> None:
        if self.current_page > 0:
            self.current_page -= 1
            self.selected_row = 0 if self.page_rows() else None

    def jump_to_absolute_row(self, row: int) -> None:
        if not self.rows:
            return
        row = min(max(row, 0), len(self.rows) - 1)
        self.current_page = row // self.page_size
        self.selected_row = row % self.page_size

    def jump_to_first_row(self) -> None:
        self.jump_to_absolute_row(0)

    def jump_to_last_row(self) -> None:
        self.jump_to_absolute_row(len(self.rows) - 1)

    # ------------------------------------------------------------------
    # Colors and tabs
    # ------------------------------------------------------------------

    def next_color(self) -> None:
        self.color_index = (self.color_index + 1) % len(PALETTES)

    def previous_color(self) -> None:
        self.color_index = (self.color_index - 1) % len(PALETTES)

    def set_tab_index(self, index: int) -> bool:
        return self.tabs.set_index(index)

    # ------------------------------------------------------------------
    # Clipboard export
    # ------------------------------------------------------------------

    def _copy(self, text: str, status: str) -> bool:
        if self.clipboard is None:
            return False
        try:
            self.clipboard.set_text(text)
        except ClipboardError as exc:
            emit_debug_event("clipboard.copy_failed", category="clipboard", error=str(exc))
            return False
        self.status_message = status
        return True

    def selected_cell_text(self) -> str | None:
        absolute = self.selected_absolute_row()
        if absolute is None or self.selected_column is None:
            return None
        if self.selected_column == 0:
            return str(absolute + 1)
        column = self.selected_data_column()
        row = self.rows[absolute]
        if column is None or column >= len(row):
            return None
        return row[column].display_text()

    def copy_selected_cell(self) -> str | None:
        text = self.selected_cell_text()
        if text is not None:
            self._copy(text, f"Copied: {text}")
        return text

    def selected_row_json(self) -> str | None:
        absolute = self.selected_absolute_row()
        if absolute is None:
            return None
        record: dict[str, Any] = {}
        for header, cell in zip(self.headers, self.rows[absolute]):
            text = cell.display_text()
            record[header] = None if is_null_text(text) else text
        return json.dumps(record, indent=2, ensure_ascii=False)

    def copy_selected_row(self) -> str | None:
        text = self.selected_row_json()
        if text is not None:
            self._copy(text, f"Copied row: {text}")
        return text

    def selected_history_entry(self) -> QueryHistoryEntry | None:
        if self.history_selected is None or not self.history:
            return None
        newest_first = list(reversed(self.history))
        if self.history_selected >= len(newest_first):
            return None
        return newest_first[self.history_selected]

    def get_selected_history_query(self) -> str | None:
        entry = self.selected_history_entry()
        return entry.query if entry is not None else None

    def copy_selected_query_to_editor(self) -> str | None:
        """Copy the selected history query; the caller puts it in the editor."""
        query = self.get_selected_history_query()
        if query is not None:
            self._copy(query, f"Copied query: {query}")
        return query

    # ------------------------------------------------------------------
    # Loading state machine
    # ------------------------------------------------------------------

    def set_history(self, entries: Sequence[QueryHistoryEntry]) -> None:
        self.history = list(entries)
        if self.history_selected is not None and self.history_selected >= len(self.history):
            self.history_selected = len(self.history) - 1 if self.history else None

    def start_loading(self) -> None:
        self.tabs.set_index(DATA_TAB)
        self.loading_state = LoadingState.loading()

    def finish_loading(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        elapsed_ms: int,
        message: str | None = None,
    ) -> None:
        self.headers = list(headers)
        self.message = message or ""
        self.rows = [coerce_row(row) for row in rows]
        self.elapsed_ms = elapsed_ms
        self.loading_state = LoadingState.idle()
        self.status_message = f"Query complete in {elapsed_ms} ms."
        self.column_widths = calculate_column_widths(self.headers, self.rows)
        self.min_column_widths = list(self.column_widths)
        self.current_page = 0
        self.horizontal_scroll = 0
        self.selected_row = 0 if self.rows else None
        self.selected_column = 1 if self.headers else None
        self.tabs.set_index(MESSAGES_TAB if not self.rows else DATA_TAB)

    def set_error_state(self, message: str) -> None:
        self.loading_state = LoadingState.error(message)
        self.message = message
        self.status_message = f"Error: {message}"
        self.tabs.set_index(MESSAGES_TAB)

    # ------------------------------------------------------------------
    # Command dispatch
    # ------------------------------------------------------------------

    def handle_command(self, command: Command) -> bool:
        """Apply a table command; returns False for commands the model does not own."""
        kind = command.kind
        if kind is CommandKind.TABLE_SET_TAB_INDEX:
            self.set_tab_index(command.payload)
            return True
        handler = _COMMAND_HANDLERS.get(kind)
        if handler is None:
            return False
        handler(self)
        return True


_COMMAND_HANDLERS = {
    CommandKind.TABLE_PREVIOUS_TAB: lambda m: m.tabs.previous(),
    CommandKind.TABLE_NEXT_TAB: lambda m: m.tabs.next(),
    CommandKind.TABLE_NEXT_ROW: ResultTableModel.next_row,
    CommandKind.TABLE_PREVIOUS_ROW: ResultTableModel.previous_row,
    CommandKind.TABLE_NEXT_HISTORY_ROW: ResultTableModel.next_history_row,
    CommandKind.TABLE_PREVIOUS_HISTORY_ROW: ResultTableModel.previous_history_row,
    CommandKind.TABLE_SCROLL_RIGHT: ResultTableModel.scroll_right,
    CommandKind.TABLE_SCROLL_LEFT: ResultTableModel.scroll_left,
    CommandKind.TABLE_NEXT_COLOR: ResultTableModel.next_color,
    CommandKind.TABLE_PREVIOUS_COLOR: ResultTableModel.previous_color,
    CommandKind.TABLE_NEXT_PAGE: ResultTableModel.next_page,
    CommandKind.TABLE_PREVIOUS_PAGE: ResultTableModel.previous_page,
    CommandKind.TABLE_JUMP_TO_FIRST_ROW: ResultTableModel.jump_to_first_row,
    CommandKind.TABLE_JUMP_TO_LAST_ROW: ResultTableModel.jump_to_last_row,
    CommandKind.TABLE_NEXT_COLUMN: ResultTableModel.next_column,
    CommandKind.TABLE_PREVIOUS_COLUMN: ResultTableModel.previous_column,
    CommandKind.TABLE_WIDEN_COLUMN: lambda m: m.adjust_column_width(1),
    CommandKind.TABLE_NARROW_COLUMN: lambda m: m.adjust_column_width(-1),
    CommandKind.TABLE_COPY_SELECTED_CELL: ResultTableModel.copy_selected_cell,
    CommandKind.TABLE_COPY_SELECTED_ROW: ResultTableModel.copy_selected_row,
}
