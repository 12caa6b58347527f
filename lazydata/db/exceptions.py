"""Error taxonomy for lazydata."""

from __future__ import annotations


class LazydataError(Exception):
    """Base class for all lazydata errors."""


class DatabaseConnectionError(LazydataError):
    """A backend connection could not be established. Fatal to the session."""


class MissingDriverError(DatabaseConnectionError):
    """The Python driver for a backend is not installed."""

    def __init__(self, driver_name: str, extra_name: str, package_name: str) -> None:
        self.driver_name = driver_name
        self.extra_name = extra_name
        self.package_name = package_name
        super().__init__(
            f"{driver_name} driver not found. Install it with: "
            f"pip install 'lazydata[{extra_name}]' (or pip install {package_name})"
        )


class QueryError(LazydataError):
    """The backend rejected or failed a statement."""

    def __init__(self, message: str, *, original: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original = original


class UnsupportedStatementError(QueryError):
    """The statement kind could not be classified."""

    def __init__(self, message: str = "Unsupported query") -> None:
        super().__init__(message)


class PersistenceError(LazydataError):
    """Reading or writing a connection/history file failed."""


class ClipboardError(LazydataError):
    """The system clipboard could not be written."""
