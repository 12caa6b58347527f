"""Tests for the pre-TUI startup sequence."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from lazydata.db.exceptions import DatabaseConnectionError, PersistenceError
from lazydata.domains.shell.app.startup_flow import NoDatabasesError, load_history, prepare_session
from lazydata.shared.core.debug_events import recent_debug_events

from tests.helpers import FakeAdapter, build_test_services, make_config, make_history_entry


def quiet_console() -> Console:
    return Console(file=io.StringIO())


class BrokenHistoryStore:
    def load_all(self):
        raise PersistenceError("Failed to read history.json")

    def save_all(self, entries):
        raise PersistenceError("Failed to write history.json")


class TestPrepareSession:
    def test_opens_session_and_lists_databases(self):
        history = [make_history_entry("SELECT 1")]
        services = build_test_services(history=history)
        result = prepare_session(services, make_config("local"), console=quiet_console())
        assert result.session.is_open
        assert result.databases == ["app", "analytics"]
        assert result.history == history
        assert recent_debug_events(category="startup")[-1].data["databases"] == 2
        [listed] = recent_debug_events(category="schema")
        assert listed.name == "schema.databases"
        assert listed.data["count"] == 2

    def test_no_databases(self):
        adapter = FakeAdapter({})
        services = build_test_services(adapter=adapter)
        with pytest.raises(NoDatabasesError, match="No databases found"):
            prepare_session(services, make_config(), console=quiet_console())
        assert adapter.connections[0].closed

    def test_connect_failure_is_wrapped(self):
        adapter = FakeAdapter(connect_error=RuntimeError("connection refused"))
        services = build_test_services(adapter=adapter)
        with pytest.raises(DatabaseConnectionError, match="connection refused"):
            prepare_session(services, make_config(), console=quiet_console())


class TestLoadHistory:
    def test_unreadable_history_starts_empty(self):
        services = build_test_services()
        services.history_store = BrokenHistoryStore()
        assert load_history(services) == []
        assert recent_debug_events(category="persistence")[-1].name == "history.load_failed"
