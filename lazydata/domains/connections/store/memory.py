"""In-memory connection store for tests."""

from __future__ import annotations

from collections.abc import Iterable

from lazydata.domains.connections.domain.config import ConnectionConfig


class InMemoryConnectionStore:
    """Connection store that keeps configs in a list."""

    def __init__(self, connections: Iterable[ConnectionConfig] = ()) -> None:
        self._connections: list[ConnectionConfig] = list(connections)

    def load_all(self) -> list[ConnectionConfig]:
        return list(self._connections)

    def save_all(self, connections: list[ConnectionConfig]) -> None:
        self._connections = list(connections)

    def get_by_name(self, name: str) -> ConnectionConfig | None:
        return next((c for c in self._connections if c.name == name), None)

    def add(self, config: ConnectionConfig) -> None:
        if self.get_by_name(config.name) is not None:
            raise ValueError(f"Connection '{config.name}' already exists")
        self._connections.append(config)

    def delete(self, name: str) -> bool:
        before = len(self._connections)
        self._connections = [c for c in self._connections if c.name != name]
        return len(self._connections) != before
