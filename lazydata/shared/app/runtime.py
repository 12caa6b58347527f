"""Runtime configuration for lazydata."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from lazydata.domains.results.app.table_model import PAGE_SIZE


@dataclass
class RuntimeConfig:
    """Runtime configuration provided by the environment, CLI or tests."""

    config_dir: Path | None = None
    debug_mode: bool = False
    debug_log_path: Path | None = None
    page_size: int = PAGE_SIZE
    history_limit: int | None = None

    @property
    def resolved_config_dir(self) -> Path:
        return self.config_dir or Path.home() / ".lazydata"

    @classmethod
    def from_env(cls) -> RuntimeConfig:
        def _parse_int(value: str | None) -> int | None:
            if not value:
                return None
            try:
                return int(value)
            except (TypeError, ValueError):
                return None

        def _parse_bool(value: str | None, default: bool) -> bool:
            if value is None or not value.strip():
                return default
            return value.strip().lower() in {"1", "true", "yes", "on"}

        config_dir_raw = os.environ.get("LAZYDATA_CONFIG_DIR", "").strip()
        config_dir = Path(config_dir_raw).expanduser() if config_dir_raw else None
        debug_mode = _parse_bool(os.environ.get("LAZYDATA_DEBUG"), False)
        debug_log_raw = os.environ.get("LAZYDATA_DEBUG_LOG", "").strip()
        if debug_log_raw:
            debug_log_path: Path | None = Path(debug_log_raw).expanduser()
        elif debug_mode:
            debug_log_path = (config_dir or Path.home() / ".lazydata") / "debug.log"
        else:
            debug_log_path = None

        page_size = _parse_int(os.environ.get("LAZYDATA_PAGE_SIZE"))
        if page_size is None or page_size <= 0:
            page_size = PAGE_SIZE
        history_limit = _parse_int(os.environ.get("LAZYDATA_HISTORY_LIMIT"))
        if history_limit is not None and history_limit <= 0:
            history_limit = None

        return cls(
            config_dir=config_dir,
            debug_mode=debug_mode,
            debug_log_path=debug_log_path,
            page_size=page_size,
            history_limit=history_limit,
        )
