"""JSON file persistence base."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from lazydata.db.exceptions import PersistenceError


def _default_config_dir() -> Path:
    override = os.environ.get("LAZYDATA_CONFIG_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".lazydata"


CONFIG_DIR = _default_config_dir()


class JSONFileStore:
    """Base class for stores backed by a single JSON file."""

    def __init__(self, file_path: Path) -> None:
        self.file_path = file_path

    def exists(self) -> bool:
        return self.file_path.exists()

    def _read_json(self) -> Any | None:
        """Return the decoded file, or None when the file does not exist."""
        if not self.file_path.exists():
            return None
        try:
            with self.file_path.open(encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Failed to read {self.file_path}: {exc}") from exc

    def _write_json(self, data: Any) -> None:
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            tmp_path.replace(self.file_path)
        except (OSError, TypeError) as exc:
            raise PersistenceError(f"Failed to write {self.file_path}: {exc}") from exc
