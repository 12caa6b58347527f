"""Service container shared by the CLI and the Textual app."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from lazydata.db.adapters.base import DatabaseAdapter
from lazydata.db.providers import get_adapter
from lazydata.domains.connections.domain.config import ConnectionConfig, DatabaseType
from lazydata.domains.connections.store.connections import ConnectionStore
from lazydata.domains.query.store.history import HistoryStore, QueryHistoryEntry
from lazydata.shared.app.runtime import RuntimeConfig
from lazydata.shared.core.debug_events import configure_debug_log
from lazydata.shared.ui.clipboard import Clipboard, SystemClipboard


class ConnectionStoreLike(Protocol):
    def load_all(self) -> list[ConnectionConfig]: ...

    def save_all(self, configs: list[ConnectionConfig]) -> None: ...

    def get_by_name(self, name: str) -> ConnectionConfig | None: ...

    def add(self, config: ConnectionConfig) -> None: ...

    def delete(self, name: str) -> bool: ...


class HistoryStoreLike(Protocol):
    def load_all(self) -> list[QueryHistoryEntry]: ...

    def save_all(self, entries: list[QueryHistoryEntry]) -> None: ...


@dataclass
class AppServices:
    runtime: RuntimeConfig
    connection_store: ConnectionStoreLike
    history_store: HistoryStoreLike
    clipboard: Clipboard
    adapter_factory: Callable[[DatabaseType], DatabaseAdapter] = get_adapter


def build_app_services(
    runtime: RuntimeConfig,
    *,
    connection_store: ConnectionStoreLike | None = None,
    history_store: HistoryStoreLike | None = None,
    clipboard: Clipboard | None = None,
    adapter_factory: Callable[[DatabaseType], DatabaseAdapter] | None = None,
) -> AppServices:
    """Wire the default stores under the configured directory."""
    config_dir = runtime.resolved_config_dir
    if runtime.debug_log_path is not None:
        configure_debug_log(runtime.debug_log_path)
    return AppServices(
        runtime=runtime,
        connection_store=connection_store or ConnectionStore(config_dir / "connections.json"),
        history_store=history_store or HistoryStore(config_dir / "history.json"),
        clipboard=clipboard or SystemClipboard(),
        adapter_factory=adapter_factory or get_adapter,
    )
