"""Tests for structured debug events."""

from __future__ import annotations

from lazydata.shared.core import debug_events
from lazydata.shared.core.debug_events import (
    MAX_EVENTS,
    DebugEvent,
    add_debug_sink,
    configure_debug_log,
    emit_debug_event,
    format_debug_data,
    recent_debug_events,
    remove_debug_sink,
)


class TestEvents:
    def test_emit_and_filter(self):
        emit_debug_event("a", category="query")
        emit_debug_event("b", category="schema")
        emit_debug_event("c", category="query")
        assert [e.name for e in recent_debug_events(category="query")] == ["a", "c"]
        assert [e.name for e in recent_debug_events(limit=1)] == ["c"]

    def test_buffer_is_bounded(self):
        for index in range(MAX_EVENTS + 10):
            emit_debug_event("tick", index=index)
        events = recent_debug_events()
        assert len(events) == MAX_EVENTS
        assert events[0].data["index"] == 10

    def test_format(self):
        event = DebugEvent("query.done", "query", {"ms": 5, "sql": "SELECT 1"}, timestamp=0.0)
        assert event.format() == '1970-01-01T00:00:00.000+00:00 [query] query.done ms=5 sql="SELECT 1"'

    def test_format_data(self):
        assert format_debug_data({"a": None, "b": True, "c": "x", "d": "", "e": [1]}) == (
            'a=null b=true c=x d="" e=[1]'
        )


class TestSinks:
    def test_sink_receives_events(self):
        received = []
        add_debug_sink(received.append)
        add_debug_sink(received.append)
        try:
            emit_debug_event("hello", category="test")
        finally:
            remove_debug_sink(received.append)
        emit_debug_event("ignored")
        assert [e.name for e in received] == ["hello"]

    def test_log_file(self, tmp_path):
        path = tmp_path / "logs" / "debug.log"
        sink = configure_debug_log(path)
        try:
            emit_debug_event("one", category="test")
            emit_debug_event("two", category="test", n=2)
        finally:
            remove_debug_sink(sink)
        lines = path.read_text().splitlines()
        assert lines[0].endswith("[test] one")
        assert lines[1].endswith("[test] two n=2")

    def test_log_file_failure_detaches_sink(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        sink = configure_debug_log(blocker / "debug.log")
        emit_debug_event("lost")
        assert sink.failed
        assert sink not in debug_events._sinks
