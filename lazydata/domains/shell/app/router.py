"""Command routing: hands each resolved command to the component that owns it.

The router performs no key resolution. Global commands change ``ShellState``
directly; editor, table and sidebar commands are forwarded verbatim to their
owners. Work that must leave the event loop (running a query, loading schema
data, quitting) is returned as effects for the app to perform.
"""

from __future__ import annotations

from dataclasses import dataclass

from lazydata.core.commands import Command, CommandCategory, CommandKind
from lazydata.core.input_context import Focus, InputContext
from lazydata.core.key_resolver import ModalInputResolver
from lazydata.core.keys import KeyPress
from lazydata.domains.explorer.domain.tree_nodes import DatabaseNode, TableNode
from lazydata.domains.explorer.state.sidebar import SidebarState
from lazydata.domains.query.editing.buffer import EditorBuffer
from lazydata.domains.results.app.table_model import ResultTableModel
from lazydata.shared.core.debug_events import emit_debug_event


@dataclass(frozen=True)
class RunQuery:
    sql: str


@dataclass(frozen=True)
class LoadTables:
    database: str


@dataclass(frozen=True)
class LoadTableMetadata:
    database: str
    table: str


@dataclass(frozen=True)
class Quit:
    pass


RouterEffect = RunQuery | LoadTables | LoadTableMetadata | Quit


@dataclass
class ShellState:
    """Global UI flags owned by the router."""

    focus: Focus = Focus.SIDEBAR
    overlay_open: bool = False
    overlay_scroll: int = 0
    should_exit: bool = False
    query_executing: bool = False
    connection_name: str | None = None


class CommandRouter:
    def __init__(
        self,
        *,
        resolver: ModalInputResolver,
        editor: EditorBuffer,
        table: ResultTableModel,
        sidebar: SidebarState,
        shell: ShellState | None = None,
    ) -> None:
        self.resolver = resolver
        self.editor = editor
        self.table = table
        self.sidebar = sidebar
        self.shell = shell or ShellState()

    def input_context(self) -> InputContext:
        return InputContext(
            focus=self.shell.focus,
            mode=self.resolver.mode,
            pending_key=self.resolver.pending_key,
            query_executing=self.shell.query_executing,
            connection_name=self.shell.connection_name,
        )

    def handle_key(self, key: KeyPress) -> list[RouterEffect] | None:
        """Resolve ``key`` and dispatch the result.

        Returns None when the key resolved to nothing, so the caller can let
        the event propagate.
        """
        if self.shell.overlay_open:
            command = self.resolver.resolve_overlay(key)
        else:
            command = self.resolver.resolve(key, self.shell.focus, self.table.tabs.index)
        if command is None:
            return None
        return self.dispatch(command, key)

    def dispatch(self, command: Command, key: KeyPress | None = None) -> list[RouterEffect]:
        category = command.category
        if category is CommandCategory.GLOBAL:
            return self._dispatch_global(command)
        if category is CommandCategory.EDITOR:
            self.editor.apply(command, self.resolver.mode)
            return []
        if category is CommandCategory.TABLE:
            return self._dispatch_table(command)
        return self._dispatch_sidebar(command)

    # ------------------------------------------------------------------
    # Global
    # ------------------------------------------------------------------

    def _dispatch_global(self, command: Command) -> list[RouterEffect]:
        kind = command.kind
        shell = self.shell
        if kind is CommandKind.QUIT:
            shell.should_exit = True
            return [Quit()]
        if kind is CommandKind.TOGGLE_FOCUS:
            shell.focus = shell.focus.next()
        elif kind is CommandKind.SHOW_KEY_MAP:
            shell.overlay_open = True
            shell.overlay_scroll = 0
        elif kind is CommandKind.CLOSE_POPUP:
            shell.overlay_open = False
        elif kind is CommandKind.KEY_MAP_SCROLL_UP:
            shell.overlay_scroll = max(0, shell.overlay_scroll - 1)
        elif kind is CommandKind.KEY_MAP_SCROLL_DOWN:
            shell.overlay_scroll += 1
        elif kind is CommandKind.EXECUTE_QUERY:
            return self._run_query(self.editor.text)
        return []

    def _run_query(self, sql: str) -> list[RouterEffect]:
        if not sql.strip():
            return []
        if self.shell.query_executing:
            emit_debug_event("query.busy", category="query")
            return []
        return [RunQuery(sql)]

    # ------------------------------------------------------------------
    # Table
    # ------------------------------------------------------------------

    def _dispatch_table(self, command: Command) -> list[RouterEffect]:
        kind = command.kind
        if kind is CommandKind.TABLE_COPY_QUERY_TO_EDITOR:
            query = self.table.copy_selected_query_to_editor()
            if query is not None:
                self.editor.set_text(query)
            return []
        if kind is CommandKind.TABLE_RUN_SELECTED_HISTORY_QUERY:
            query = self.table.get_selected_history_query()
            if query is None:
                return []
            self.editor.set_text(query)
            return self._run_query(query)
        self.table.handle_command(command)
        return []

    # ------------------------------------------------------------------
    # Sidebar
    # ------------------------------------------------------------------

    def _dispatch_sidebar(self, command: Command) -> list[RouterEffect]:
        if command.kind is not CommandKind.SIDEBAR_TOGGLE_SELECTED:
            self.sidebar.handle_command(command)
            return []
        row = self.sidebar.toggle_selected()
        if row is None or row.expanded:
            # Nothing selected, or the node was just collapsed.
            return []
        node = row.node
        if isinstance(node, DatabaseNode) and not self.sidebar.has_tables(node.name):
            return [LoadTables(node.name)]
        if isinstance(node, TableNode) and not self.sidebar.has_metadata(node.database, node.name):
            return [LoadTableMetadata(node.database, node.name)]
        return []

