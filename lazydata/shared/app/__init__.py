"""Application-level wiring shared by the CLI and the TUI."""

from .runtime import RuntimeConfig
from .services import AppServices, build_app_services

__all__ = ["AppServices", "RuntimeConfig", "build_app_services"]
