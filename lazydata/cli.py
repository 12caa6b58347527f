"""Command-line entry point for lazydata."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence

from lazydata import __version__
from lazydata.commands import (
    cmd_connection_create,
    cmd_connection_delete,
    cmd_connection_list,
    cmd_history,
    cmd_launch,
)
from lazydata.shared.app import AppServices, RuntimeConfig, build_app_services

SUBCOMMANDS = ("connection", "history")


def build_launch_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazydata",
        description="Terminal client for browsing databases and running queries.",
        epilog="Other commands: lazydata connection {list,create,delete}, lazydata history",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("connection", nargs="?", help="Name of a saved connection to open")
    parser.set_defaults(func=cmd_launch)
    return parser


def build_command_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lazydata")
    subparsers = parser.add_subparsers(dest="command", required=True)

    conn_parser = subparsers.add_parser("connection", help="Manage saved connections")
    conn_sub = conn_parser.add_subparsers(dest="connection_command", required=True)

    list_parser = conn_sub.add_parser("list", help="List saved connections")
    list_parser.set_defaults(func=cmd_connection_list)

    create_parser = conn_sub.add_parser("create", help="Save a new connection")
    create_parser.add_argument("--name", required=True, help="Connection name")
    create_parser.add_argument(
        "--db-type",
        default="postgresql",
        help="Database type: postgresql, mysql or sqlite (default: postgresql)",
    )
    create_parser.add_argument("--host", help="Server host[:port], or the database file for SQLite")
    create_parser.add_argument("--user", default="", help="User name")
    create_parser.add_argument("--password", default=None, help="Password (prompted at launch when omitted)")
    create_parser.set_defaults(func=cmd_connection_create)

    delete_parser = conn_sub.add_parser("delete", help="Delete a saved connection")
    delete_parser.add_argument("connection_name", help="Connection name")
    delete_parser.set_defaults(func=cmd_connection_delete)

    history_parser = subparsers.add_parser("history", help="Show query history")
    history_parser.add_argument("--connection", default=None, help="Only show queries for this connection")
    history_parser.set_defaults(func=cmd_history)
    return parser


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    if argv and argv[0] in SUBCOMMANDS:
        return build_command_parser().parse_args(argv)
    return build_launch_parser().parse_args(argv)


def main(
    argv: Sequence[str] | None = None,
    *,
    services_factory: Callable[[RuntimeConfig], AppServices] = build_app_services,
) -> int:
    args = parse_args(list(sys.argv[1:] if argv is None else argv))
    services = services_factory(RuntimeConfig.from_env())
    return args.func(args, services)


if __name__ == "__main__":
    sys.exit(main())
