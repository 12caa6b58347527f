"""Tree node data types for the sidebar."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DatabaseNode:
    """Node representing a database on the server."""

    name: str

    def get_label_text(self) -> str:
        return self.name

    def get_node_kind(self) -> str:
        return "database"

    def get_node_path_part(self) -> str:
        return f"db:{self.name}"


@dataclass(frozen=True)
class FolderNode:
    """Grouping node ("Tables", "Columns", "Indexes", ...)."""

    label: str
    database: str
    table: str | None = None

    def get_label_text(self) -> str:
        return self.label

    def get_node_kind(self) -> str:
        return "folder"

    def get_node_path_part(self) -> str:
        return f"folder:{self.label}"


@dataclass(frozen=True)
class TableNode:
    """Node representing a table inside a database."""

    database: str
    name: str

    def get_label_text(self) -> str:
        return self.name

    def get_node_kind(self) -> str:
        return "table"

    def get_node_path_part(self) -> str:
        return f"table:{self.name}"


@dataclass(frozen=True)
class DetailNode:
    """Leaf row inside a table's metadata (a column, index, trigger...)."""

    text: str

    def get_label_text(self) -> str:
        return self.text

    def get_node_kind(self) -> str:
        return "detail"

    def get_node_path_part(self) -> str:
        return f"item:{self.text}"


SidebarNode = DatabaseNode | FolderNode | TableNode | DetailNode
