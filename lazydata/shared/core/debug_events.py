"""Structured debug events.

Everything the app wants to log goes through ``emit_debug_event``. Events are
kept in a bounded in-memory buffer and fanned out to registered sinks; the
file sink installed by ``configure_debug_log`` appends one line per event.
"""

from __future__ import annotations

import json
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

MAX_EVENTS = 500

DebugSink = Callable[["DebugEvent"], None]


@dataclass(frozen=True)
class DebugEvent:
    name: str
    category: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    @property
    def iso(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).isoformat(timespec="milliseconds")

    def format(self) -> str:
        data = format_debug_data(self.data)
        line = f"{self.iso} [{self.category}] {self.name}"
        return f"{line} {data}" if data else line


_events: deque[DebugEvent] = deque(maxlen=MAX_EVENTS)
_sinks: list[DebugSink] = []
_lock = threading.Lock()


def format_debug_data(data: dict[str, Any]) -> str:
    """Render event data as ``key=value`` pairs, JSON-encoding non-scalars."""
    parts = []
    for key, value in data.items():
        if value is None or isinstance(value, (bool, int, float)):
            rendered = json.dumps(value)
        elif isinstance(value, str):
            rendered = json.dumps(value) if (" " in value or not value) else value
        else:
            rendered = json.dumps(value, default=str)
        parts.append(f"{key}={rendered}")
    return " ".join(parts)


def emit_debug_event(name: str, *, category: str = "general", **data: Any) -> DebugEvent:
    event = DebugEvent(name=name, category=category, data=data)
    with _lock:
        _events.append(event)
        sinks = list(_sinks)
    for sink in sinks:
        sink(event)
    return event


def recent_debug_events(limit: int | None = None, *, category: str | None = None) -> list[DebugEvent]:
    with _lock:
        events = [e for e in _events if category is None or e.category == category]
    if limit is not None:
        return events[-limit:]
    return events


def clear_debug_events() -> None:
    with _lock:
        _events.clear()


def add_debug_sink(sink: DebugSink) -> None:
    with _lock:
        if sink not in _sinks:
            _sinks.append(sink)


def remove_debug_sink(sink: DebugSink) -> None:
    with _lock:
        if sink in _sinks:
            _sinks.remove(sink)


class DebugLogFile:
    """Sink that appends formatted events to a file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.failed = False

    def __call__(self, event: DebugEvent) -> None:
        if self.failed:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(event.format() + "\n")
        except OSError:
            # Logging must never take the UI down; stop writing after the first failure.
            self.failed = True
            remove_debug_sink(self)


def configure_debug_log(path: Path) -> DebugLogFile:
    sink = DebugLogFile(path)
    add_debug_sink(sink)
    return sink
