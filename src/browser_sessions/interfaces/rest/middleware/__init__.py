"""
REST middleware.
"""
from browser_sessions.interfaces.rest.middleware.logging_middleware import RequestLoggingMiddleware
from browser_sessions.interfaces.rest.middleware.request_guards import (
    ensure_close_notifier,
    ensure_post,
)

__all__ = [
    "RequestLoggingMiddleware",
    "ensure_close_notifier",
    "ensure_post",
]
