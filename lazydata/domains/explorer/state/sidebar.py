"""Sidebar tree state: databases, their tables and table metadata.

The tree is rebuilt from the loaded catalog on every read and flattened into
the rows currently visible. Expansion and selection are tracked by node path
(``db:app/folder:Tables/table:users``) so they survive reloads.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from lazydata.core.commands import Command, CommandKind
from lazydata.db.adapters.base import TableMetadata
from lazydata.domains.explorer.domain.tree_nodes import (
    DatabaseNode,
    DetailNode,
    FolderNode,
    SidebarNode,
    TableNode,
)

TABLES_FOLDER = "Tables"
DEFAULT_VIEWPORT_HEIGHT = 20


@dataclass(frozen=True)
class SidebarRow:
    path: str
    node: SidebarNode
    label: str
    depth: int
    expandable: bool
    expanded: bool


def table_label(metadata: TableMetadata | None, name: str) -> str:
    if metadata is None or metadata.row_count is None:
        return name
    count = metadata.row_count
    return f"{name} ({count} row{'' if count == 1 else 's'})"


def metadata_sections(metadata: TableMetadata) -> list[tuple[str, list[str]]]:
    return [
        ("Columns", [f"{col.name} ({col.data_type})" for col in metadata.columns]),
        ("Constraints", list(metadata.constraints)),
        ("Indexes", list(metadata.indexes)),
        ("RLS Policies", list(metadata.rls_policies)),
        ("Rules", list(metadata.rules)),
        ("Triggers", list(metadata.triggers)),
    ]


class SidebarState:
    """Selection, expansion and scrolling for the database tree."""

    def __init__(self, databases: Iterable[str] = ()) -> None:
        self.databases: list[str] = list(databases)
        self.tables: dict[str, list[str]] = {}
        self.metadata: dict[tuple[str, str], TableMetadata] = {}
        self.expanded: set[str] = set()
        self.selected: str | None = None
        self.scroll_offset = 0
        self.viewport_height = DEFAULT_VIEWPORT_HEIGHT
        self._handlers: dict[CommandKind, Callable[[Command], object]] = {
            CommandKind.SIDEBAR_TOGGLE_SELECTED: lambda _c: self.toggle_selected(),
            CommandKind.SIDEBAR_KEY_LEFT: lambda _c: self.key_left(),
            CommandKind.SIDEBAR_KEY_RIGHT: lambda _c: self.key_right(),
            CommandKind.SIDEBAR_KEY_DOWN: lambda _c: self.key_down(),
            CommandKind.SIDEBAR_KEY_UP: lambda _c: self.key_up(),
            CommandKind.SIDEBAR_DESELECT: lambda _c: self.deselect(),
            CommandKind.SIDEBAR_SELECT_FIRST: lambda _c: self.select_first(),
            CommandKind.SIDEBAR_SELECT_LAST: lambda _c: self.select_last(),
            CommandKind.SIDEBAR_SCROLL_DOWN: lambda c: self.scroll_down(c.payload),
            CommandKind.SIDEBAR_SCROLL_UP: lambda c: self.scroll_up(c.payload),
        }

    # ------------------------------------------------------------------
    # Catalog updates
    # ------------------------------------------------------------------

    def set_tables(self, database: str, tables: Iterable[str]) -> None:
        self.tables[database] = list(tables)
        # Tables sit one level below the database; open both.
        db_path = DatabaseNode(database).get_node_path_part()
        self.expanded.add(db_path)
        self.expanded.add(f"{db_path}/{FolderNode(TABLES_FOLDER, database).get_node_path_part()}")

    def set_table_metadata(self, database: str, table: str, metadata: TableMetadata) -> None:
        self.metadata[(database, table)] = metadata

    def has_tables(self, database: str) -> bool:
        return database in self.tables

    def has_metadata(self, database: str, table: str) -> bool:
        return (database, table) in self.metadata

    # ------------------------------------------------------------------
    # Tree flattening
    # ------------------------------------------------------------------

    def visible_rows(self) -> list[SidebarRow]:
        rows: list[SidebarRow] = []
        for database in self.databases:
            db_node = DatabaseNode(database)
            db_path = db_node.get_node_path_part()
            db_open = db_path in self.expanded
            rows.append(SidebarRow(db_path, db_node, database, 0, True, db_open))
            if db_open and database in self.tables:
                self._add_tables(rows, database, db_path)
        return rows

    def _add_tables(self, rows: list[SidebarRow], database: str, db_path: str) -> None:
        folder = FolderNode(TABLES_FOLDER, database)
        folder_path = f"{db_path}/{folder.get_node_path_part()}"
        tables = self.tables[database]
        folder_open = folder_path in self.expanded
        rows.append(SidebarRow(folder_path, folder, TABLES_FOLDER, 1, bool(tables), folder_open and bool(tables)))
        if not folder_open:
            return
        for table in tables:
            node = TableNode(database, table)
            path = f"{folder_path}/{node.get_node_path_part()}"
            metadata = self.metadata.get((database, table))
            is_open = path in self.expanded
            rows.append(SidebarRow(path, node, table_label(metadata, table), 2, True, is_open))
            if is_open and metadata is not None:
                self._add_metadata(rows, database, table, path, metadata)

    def _add_metadata(
        self,
        rows: list[SidebarRow],
        database: str,
        table: str,
        table_path: str,
        metadata: TableMetadata,
    ) -> None:
        for label, items in metadata_sections(metadata):
            section = FolderNode(label, database, table)
            path = f"{table_path}/{section.get_node_path_part()}"
            is_open = path in self.expanded and bool(items)
            rows.append(SidebarRow(path, section, label, 3, bool(items), is_open))
            if not is_open:
                continue
            for item in items:
                leaf = DetailNode(item)
                rows.append(SidebarRow(f"{path}/{leaf.get_node_path_part()}", leaf, item, 4, False, False))

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _selected_index(self, rows: list[SidebarRow]) -> int | None:
        for index, row in enumerate(rows):
            if row.path == self.selected:
                return index
        return None

    def selected_row(self) -> SidebarRow | None:
        rows = self.visible_rows()
        index = self._selected_index(rows)
        return rows[index] if index is not None else None

    def _select_index(self, rows: list[SidebarRow], index: int) -> None:
        if not rows:
            self.selected = None
            return
        index = max(0, min(index, len(rows) - 1))
        self.selected = rows[index].path
        self._ensure_visible(index)

    def toggle_selected(self) -> SidebarRow | None:
        """Open or close the selected node; returns it as it was before toggling."""
        row = self.selected_row()
        if row is None or not row.expandable:
            return row
        if row.path in self.expanded:
            self.expanded.discard(row.path)
        else:
            self.expanded.add(row.path)
        return row

    def key_left(self) -> None:
        rows = self.visible_rows()
        index = self._selected_index(rows)
        if index is None:
            return
        row = rows[index]
        if row.expanded:
            self.expanded.discard(row.path)
            return
        parent_path = row.path.rsplit("/", 1)[0] if "/" in row.path else None
        if parent_path is not None:
            self.selected = parent_path
            parent_index = self._selected_index(rows)
            if parent_index is not None:
                self._ensure_visible(parent_index)

    def key_right(self) -> None:
        row = self.selected_row()
        if row is not None and row.expandable:
            self.expanded.add(row.path)

    def key_down(self) -> None:
        rows = self.visible_rows()
        index = self._selected_index(rows)
        self._select_index(rows, 0 if index is None else index + 1)

    def key_up(self) -> None:
        rows = self.visible_rows()
        index = self._selected_index(rows)
        self._select_index(rows, len(rows) - 1 if index is None else index - 1)

    def deselect(self) -> None:
        self.selected = None

    def select_first(self) -> None:
        self._select_index(self.visible_rows(), 0)

    def select_last(self) -> None:
        rows = self.visible_rows()
        self._select_index(rows, len(rows) - 1)

    def scroll_down(self, lines: int) -> None:
        max_offset = max(0, len(self.visible_rows()) - self.viewport_height)
        self.scroll_offset = min(self.scroll_offset + lines, max_offset)

    def scroll_up(self, lines: int) -> None:
        self.scroll_offset = max(0, self.scroll_offset - lines)

    def _ensure_visible(self, index: int) -> None:
        height = max(1, self.viewport_height)
        if index < self.scroll_offset:
            self.scroll_offset = index
        elif index >= self.scroll_offset + height:
            self.scroll_offset = index - height + 1

    def handle_command(self, command: Command) -> bool:
        handler = self._handlers.get(command.kind)
        if handler is None:
            return False
        handler(command)
        return True
