"""CLI command handlers for lazydata."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from lazydata.db.exceptions import LazydataError, PersistenceError
from lazydata.domains.connections.domain.config import ConnectionConfig, DatabaseType

if TYPE_CHECKING:
    from argparse import Namespace

    from lazydata.shared.app import AppServices

NEW_CONNECTION_CHOICE = "new"


def _truncate(value: str, width: int) -> str:
    return value[: width - 2] + ".." if len(value) > width else value


def cmd_connection_list(args: Namespace, services: AppServices, *, console: Console | None = None) -> int:
    """List all saved connections."""
    console = console or Console()
    try:
        connections = services.connection_store.load_all()
    except PersistenceError as e:
        console.print(f"Error: {e}", markup=False)
        return 1
    if not connections:
        console.print("No saved connections.")
        return 0

    table = Table(show_edge=False)
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Target")
    table.add_column("Password")
    for conn in connections:
        table.add_row(
            Text(conn.name),
            conn.db_type.value,
            Text(_truncate(conn.display_target, 40)),
            "N/A" if conn.db_type.is_file_based else ("saved" if conn.password is not None else "prompt"),
        )
    console.print(table)
    return 0


def cmd_connection_create(args: Namespace, services: AppServices, *, console: Console | None = None) -> int:
    """Create a new connection."""
    console = console or Console()
    try:
        db_type = DatabaseType.parse(args.db_type or DatabaseType.POSTGRESQL.value)
    except ValueError as e:
        console.print(f"Error: {e}", markup=False)
        return 1
    if not args.host:
        target = "--host (the database file path)" if db_type.is_file_based else "--host"
        console.print(f"Error: {target} is required for {db_type.value} connections.", markup=False)
        return 1

    config = ConnectionConfig(
        name=args.name,
        host=args.host,
        user=args.user or "",
        password=args.password,
        db_type=db_type,
    )
    try:
        services.connection_store.add(config)
    except ValueError as e:
        console.print(f"Error: {e}", markup=False)
        return 1
    except PersistenceError as e:
        console.print(f"Error: {e}", markup=False)
        return 1
    console.print(f"Connection '{args.name}' created successfully.", markup=False)
    return 0


def cmd_connection_delete(args: Namespace, services: AppServices, *, console: Console | None = None) -> int:
    """Delete a saved connection."""
    console = console or Console()
    try:
        deleted = services.connection_store.delete(args.connection_name)
    except PersistenceError as e:
        console.print(f"Error: {e}", markup=False)
        return 1
    if not deleted:
        console.print(f"Error: Connection '{args.connection_name}' not found.", markup=False)
        return 1
    console.print(f"Connection '{args.connection_name}' deleted successfully.", markup=False)
    return 0


def cmd_history(args: Namespace, services: AppServices, *, console: Console | None = None) -> int:
    """Print saved query history, newest first."""
    console = console or Console()
    try:
        entries = services.history_store.load_all()
    except PersistenceError as e:
        console.print(f"Error: {e}", markup=False)
        return 1
    name = getattr(args, "connection", None)
    if name:
        entries = [entry for entry in entries if entry.connection_name == name]
    if not entries:
        console.print("No query history.")
        return 0

    table = Table(show_edge=False)
    table.add_column("Time", no_wrap=True)
    table.add_column("Connection")
    table.add_column("Status")
    table.add_column("Rows", justify="right")
    table.add_column("ms", justify="right")
    table.add_column("Query", overflow="ellipsis", no_wrap=True)
    for entry in reversed(entries):
        table.add_row(
            Text(entry.display_timestamp),
            Text(entry.connection_name or ""),
            "[green]OK[/]" if entry.success else "[red]Error[/]",
            str(entry.rows_affected),
            str(entry.execution_time_ms),
            Text(entry.query.replace("\n", " ")),
        )
    console.print(table)
    return 0


# ----------------------------------------------------------------------
# Launch
# ----------------------------------------------------------------------


def prompt_new_connection(services: AppServices, *, console: Console | None = None) -> ConnectionConfig:
    """Ask for a new connection interactively and save it."""
    console = console or Console()
    type_names = {t.name.lower(): t for t in DatabaseType}
    choice = Prompt.ask("Database type", choices=list(type_names), default="postgresql", console=console)
    db_type = type_names[choice]
    name = Prompt.ask("Connection name", console=console)
    host = Prompt.ask("Database file" if db_type.is_file_based else "Host", console=console)
    user = "" if db_type.is_file_based else Prompt.ask("User", default="", console=console)
    password: str | None = None
    if not db_type.is_file_based:
        password = Prompt.ask("Password", password=True, console=console)
    save_password = password is not None and Confirm.ask("Save password?", default=False, console=console)

    stored = ConnectionConfig(
        name=name,
        host=host,
        user=user,
        password=password if save_password else None,
        db_type=db_type,
    )
    services.connection_store.add(stored)
    return replace(stored, password=password)


def resolve_launch_connection(
    services: AppServices,
    name: str | None,
    *,
    console: Console | None = None,
) -> ConnectionConfig | None:
    """Pick the connection to open; None when the user declines to create one."""
    console = console or Console()
    connections = services.connection_store.load_all()
    if name:
        for conn in connections:
            if conn.name == name:
                return conn
        raise LazydataError(f"Connection '{name}' not found.")

    if not connections:
        console.print("No saved connections found.")
        if not Confirm.ask("Would you like to create a new connection?", default=True, console=console):
            return None
        return prompt_new_connection(services, console=console)

    if len(connections) == 1:
        return connections[0]

    names = [conn.name for conn in connections]
    for index, conn_name in enumerate(names, start=1):
        console.print(f"  {index}. {conn_name}", markup=False)
    choices = [str(i) for i in range(1, len(names) + 1)] + [NEW_CONNECTION_CHOICE]
    selected = Prompt.ask("Select a connection", choices=choices, default="1", console=console)
    if selected == NEW_CONNECTION_CHOICE:
        return prompt_new_connection(services, console=console)
    return connections[int(selected) - 1]


def ensure_password(config: ConnectionConfig, *, console: Console | None = None) -> ConnectionConfig:
    if config.db_type.is_file_based or config.password is not None:
        return config
    password = Prompt.ask("Password", password=True, console=console or Console())
    return replace(config, password=password)


def cmd_launch(args: Namespace, services: AppServices, *, console: Console | None = None) -> int:
    """Connect, fetch databases and run the TUI."""
    from lazydata.domains.shell.app.main import LazyDataApp
    from lazydata.domains.shell.app.startup_flow import prepare_session

    console = console or Console()
    try:
        config = resolve_launch_connection(services, getattr(args, "connection", None), console=console)
        if config is None:
            console.print("Bye")
            return 0
        config = ensure_password(config, console=console)
        startup = prepare_session(services, config, console=Console(stderr=True))
    except (LazydataError, ValueError) as e:
        console.print(f"Error: {e}", markup=False)
        return 1

    app = LazyDataApp(services=services, config=config, startup=startup)
    app.run()
    return 0
