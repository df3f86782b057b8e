"""
Logging infrastructure for the browser session launcher.

Exports logging configuration and utilities.
"""

from browser_sessions.infrastructure.logging.logging_config import (
    configure_logging,
    get_logger,
    bind_context,
    clear_context,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
