"""Main Textual application for lazydata."""

from __future__ import annotations

import asyncio
from typing import Any, ClassVar

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.events import Key
from textual.widgets import Static

from lazydata.core.input_context import Focus
from lazydata.core.key_resolver import ModalInputResolver
from lazydata.core.keys import KeyPress
from lazydata.db.exceptions import LazydataError, PersistenceError, QueryError
from lazydata.domains.connections.domain.config import ConnectionConfig
from lazydata.domains.explorer.app.schema_service import SchemaService
from lazydata.domains.explorer.state.sidebar import SidebarState
from lazydata.domains.explorer.ui.sidebar_view import SidebarView
from lazydata.domains.query.app.context import AppContext
from lazydata.domains.query.app.pipeline import DataResult, QueryPipeline
from lazydata.domains.query.editing.buffer import EditorBuffer
from lazydata.domains.query.ui.editor_view import QueryEditor, mode_title
from lazydata.domains.results.app.table_model import ResultTableModel
from lazydata.domains.results.ui.table_view import ResultsView
from lazydata.domains.shell.app.router import (
    CommandRouter,
    LoadTableMetadata,
    LoadTables,
    Quit,
    RouterEffect,
    RunQuery,
    ShellState,
)
from lazydata.domains.shell.app.startup_flow import StartupResult
from lazydata.domains.shell.ui.help_overlay import KeyMapOverlay
from lazydata.shared.app import AppServices
from lazydata.shared.core.debug_events import emit_debug_event
from lazydata.shared.ui.clipboard import SystemClipboard

APP_CSS = """
Screen {
    layers: base overlay;
}

#content {
    height: 1fr;
}

#sidebar {
    width: 32;
    border: round $surface-lighten-2;
    border-title-color: $text-muted;
}

#main-panel {
    width: 1fr;
}

#query-area {
    height: 35%;
    border: round $surface-lighten-2;
    border-title-color: $text-muted;
}

#results-area {
    height: 1fr;
    border: round $surface-lighten-2;
    border-title-color: $text-muted;
}

#sidebar.active-pane, #query-area.active-pane, #results-area.active-pane {
    border: round $primary;
    border-title-color: $primary;
}

#status-bar {
    height: 1;
    padding: 0 1;
    background: $panel;
}
"""

PANE_IDS = {
    Focus.SIDEBAR: "#sidebar",
    Focus.EDITOR: "#query-area",
    Focus.TABLE: "#results-area",
}


class LazyDataApp(App):
    """Three-pane database client: sidebar, query editor and results."""

    TITLE = "lazydata"
    CSS = APP_CSS

    BINDINGS: ClassVar[list[Any]] = []

    def __init__(
        self,
        *,
        services: AppServices,
        config: ConnectionConfig,
        startup: StartupResult,
    ) -> None:
        super().__init__()
        self.services = services
        self.config = config
        self.session = startup.session
        self.context = AppContext(startup.history, history_limit=services.runtime.history_limit)
        self.pipeline = QueryPipeline(self.context, config.name)
        self.schema = SchemaService(self.session)
        self.editor_buffer = EditorBuffer(clipboard=services.clipboard)
        self.table_model = ResultTableModel(page_size=services.runtime.page_size, clipboard=services.clipboard)
        self.table_model.set_history(self.context.history_for(config.name))
        self.sidebar_state = SidebarState(startup.databases)
        self.router = CommandRouter(
            resolver=ModalInputResolver(),
            editor=self.editor_buffer,
            table=self.table_model,
            sidebar=self.sidebar_state,
            shell=ShellState(connection_name=config.name),
        )
        self.status_message = ""
        self._views_ready = False

    @property
    def shell(self) -> ShellState:
        return self.router.shell

    @property
    def status_bar(self) -> Static:
        return self.query_one("#status-bar", Static)

    @property
    def sidebar_view(self) -> SidebarView:
        return self.query_one("#sidebar-view", SidebarView)

    @property
    def query_editor(self) -> QueryEditor:
        return self.query_one("#query-editor", QueryEditor)

    @property
    def results_view(self) -> ResultsView:
        return self.query_one("#results-view", ResultsView)

    @property
    def key_map_overlay(self) -> KeyMapOverlay:
        return self.query_one("#key-map", KeyMapOverlay)

    def compose(self) -> ComposeResult:
        with Vertical(id="main-container"):
            with Horizontal(id="content"):
                with Container(id="sidebar"):
                    yield SidebarView(self.sidebar_state, id="sidebar-view")
                with Vertical(id="main-panel"):
                    with Container(id="query-area"):
                        yield QueryEditor(self.editor_buffer, id="query-editor")
                    with Container(id="results-area"):
                        yield ResultsView(self.table_model, id="results-view")
            yield Static("", id="status-bar")
        yield KeyMapOverlay(id="key-map")

    def on_mount(self) -> None:
        clipboard = self.services.clipboard
        if isinstance(clipboard, SystemClipboard) and clipboard.terminal_copy is None:
            clipboard.terminal_copy = self.copy_to_clipboard
        self.query_one("#sidebar").border_title = "Databases"
        self.query_one("#results-area").border_title = "Results"
        self._views_ready = True
        emit_debug_event("app.mount", category="app", connection=self.config.name)
        self.call_after_refresh(self.refresh_views)

    def on_unmount(self) -> None:
        """Persist history and release the connection."""
        self._views_ready = False
        try:
            self.services.history_store.save_all(self.context.history())
        except PersistenceError as e:
            emit_debug_event("history.save_failed", category="persistence", error=str(e))
        self.session.close()

    def on_resize(self) -> None:
        self.call_after_refresh(self.refresh_views)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_key(self, event: Key) -> None:
        """Route key presses through the resolver and command router."""
        effects = self.router.handle_key(KeyPress.from_textual(event))
        if effects is None:
            # The resolver may still have consumed half of an operator.
            self.refresh_views()
            return
        event.prevent_default()
        event.stop()
        for effect in effects:
            self.perform_effect(effect)
        self.refresh_views()

    def perform_effect(self, effect: RouterEffect) -> None:
        if isinstance(effect, Quit):
            self.exit()
        elif isinstance(effect, RunQuery):
            self.start_query(effect.sql)
        elif isinstance(effect, LoadTables):
            self.run_worker(self._load_tables_async(effect.database), name=f"load-tables-{effect.database}")
        elif isinstance(effect, LoadTableMetadata):
            self.run_worker(
                self._load_metadata_async(effect.database, effect.table),
                name=f"load-metadata-{effect.database}-{effect.table}",
            )

    # ------------------------------------------------------------------
    # Query execution
    # ------------------------------------------------------------------

    def start_query(self, sql: str) -> None:
        self.shell.query_executing = True
        self.table_model.start_loading()
        self.status_message = "Running query..."
        self.run_worker(self._run_query_async(sql), name="query_execution", exclusive=True)

    async def _run_query_async(self, sql: str) -> None:
        try:
            executor = self.session.executor
            result = await asyncio.to_thread(self.pipeline.execute, executor, sql)
        except QueryError as e:
            self.table_model.set_error_state(e.message)
        except LazydataError as e:
            self.table_model.set_error_state(str(e))
        else:
            stats = self.context.stats
            elapsed_ms = stats.elapsed_ms if stats is not None else 0
            if isinstance(result, DataResult):
                self.table_model.finish_loading(result.headers, result.rows, elapsed_ms, result.message)
            else:
                self.table_model.finish_loading([], [], elapsed_ms, result.message)
        finally:
            self.shell.query_executing = False
            self.table_model.set_history(self.context.history_for(self.config.name))
            self.status_message = self.table_model.status_message or ""
            self.refresh_views()

    # ------------------------------------------------------------------
    # Schema loading
    # ------------------------------------------------------------------

    async def _load_tables_async(self, database: str) -> None:
        self.status_message = f"Loading tables for {database}..."
        self.refresh_views()
        try:
            tables = await asyncio.to_thread(self.schema.list_tables, database)
        except LazydataError as e:
            self.status_message = f"Error loading tables: {e}"
        else:
            self.sidebar_state.set_tables(database, tables)
            self.status_message = f"Using database {database}"
        self.refresh_views()

    async def _load_metadata_async(self, database: str, table: str) -> None:
        try:
            metadata = await asyncio.to_thread(self.schema.get_table_metadata, database, table)
        except LazydataError as e:
            self.status_message = f"Error loading {table}: {e}"
        else:
            self.sidebar_state.set_table_metadata(database, table, metadata)
        self.refresh_views()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def refresh_views(self) -> None:
        if not self._views_ready:
            return
        focus = self.shell.focus
        self.sidebar_view.refresh_state()
        self.query_editor.refresh_buffer(active=focus is Focus.EDITOR)
        self.results_view.refresh_model()
        self.query_one("#query-area").border_title = mode_title(self.editor_buffer)
        for pane_focus, selector in PANE_IDS.items():
            self.query_one(selector).set_class(pane_focus is focus, "active-pane")
        if self.shell.overlay_open:
            self.shell.overlay_scroll = self.key_map_overlay.show(self.shell.overlay_scroll)
        else:
            self.key_map_overlay.hide()
        self._update_status_bar()

    def _update_status_bar(self) -> None:
        context = self.router.input_context()
        parts = [
            f"[bold]{context.focus.title}[/]",
            context.mode.label,
            f"[cyan]{escape(context.connection_name or '')}[/]",
        ]
        if context.pending_key:
            parts.append(f"[yellow]{escape(context.pending_key)}[/]")
        if context.query_executing:
            parts.append("[italic]executing...[/]")
        message = self.status_message or self.table_model.status_message
        if message:
            parts.append(escape(message))
        parts.append("[dim]? help[/]")
        self.status_bar.update("  │  ".join(parts))
