"""Startup sequence run before the TUI takes over the terminal.

Connects, loads history for the connection and fetches the database list
under a spinner. Failures here end the program, so everything raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import Console

from lazydata.db.exceptions import LazydataError, PersistenceError
from lazydata.db.executor import ConnectionSession
from lazydata.domains.connections.domain.config import ConnectionConfig
from lazydata.domains.explorer.app.schema_service import SchemaService
from lazydata.domains.query.store.history import QueryHistoryEntry
from lazydata.shared.app.services import AppServices
from lazydata.shared.core.debug_events import emit_debug_event
from lazydata.shared.ui.spinner import Spinner


class NoDatabasesError(LazydataError):
    """The server reported no user databases."""

    def __init__(self) -> None:
        super().__init__("No databases found on the server.")


@dataclass
class StartupResult:
    session: ConnectionSession
    databases: list[str]
    history: list[QueryHistoryEntry] = field(default_factory=list)


def load_history(services: AppServices) -> list[QueryHistoryEntry]:
    """Load saved history; an unreadable file starts an empty history."""
    try:
        return services.history_store.load_all()
    except PersistenceError as e:
        emit_debug_event("history.load_failed", category="persistence", error=str(e))
        return []


def prepare_session(
    services: AppServices,
    config: ConnectionConfig,
    *,
    console: Console | None = None,
) -> StartupResult:
    history = load_history(services)
    adapter = services.adapter_factory(config.db_type)
    session = ConnectionSession(config, adapter)
    session.open()
    try:
        with Spinner("Fetching databases...", console=console):
            databases = SchemaService(session).list_databases()
    except LazydataError:
        session.close()
        raise
    if not databases:
        session.close()
        raise NoDatabasesError()
    emit_debug_event("startup.ready", category="startup", connection=config.name, databases=len(databases))
    return StartupResult(session=session, databases=databases, history=history)
