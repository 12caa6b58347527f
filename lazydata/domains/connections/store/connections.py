"""Connection store for managing saved database connections."""

from __future__ import annotations

from pathlib import Path

from lazydata.domains.connections.domain.config import ConnectionConfig
from lazydata.shared.core.debug_events import emit_debug_event
from lazydata.shared.core.store import CONFIG_DIR, JSONFileStore


class ConnectionStore(JSONFileStore):
    """Saved connections, stored as a JSON list in ``connections.json``.

    Each record is ``{name, host, user, password?, db_type}``. Records that
    cannot be parsed are skipped on load rather than failing the whole file.
    """

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or CONFIG_DIR / "connections.json")

    def load_all(self) -> list[ConnectionConfig]:
        data = self._read_json()
        if data is None:
            return []
        if not isinstance(data, list):
            emit_debug_event("connections.invalid_payload", category="persistence", path=str(self.file_path))
            return []
        configs: list[ConnectionConfig] = []
        for raw in data:
            if not isinstance(raw, dict):
                continue
            try:
                configs.append(ConnectionConfig.from_dict(raw))
            except (KeyError, ValueError) as exc:
                emit_debug_event(
                    "connections.skip_record",
                    category="persistence",
                    reason=str(exc),
                )
        return configs

    def save_all(self, connections: list[ConnectionConfig]) -> None:
        self._write_json([config.to_dict() for config in connections])

    def get_by_name(self, name: str) -> ConnectionConfig | None:
        for config in self.load_all():
            if config.name == name:
                return config
        return None

    def add(self, config: ConnectionConfig) -> None:
        """Append a new connection; names are unique."""
        connections = self.load_all()
        if any(c.name == config.name for c in connections):
            raise ValueError(f"Connection '{config.name}' already exists")
        connections.append(config)
        self.save_all(connections)

    def delete(self, name: str) -> bool:
        connections = self.load_all()
        remaining = [c for c in connections if c.name != name]
        if len(remaining) == len(connections):
            return False
        self.save_all(remaining)
        return True
