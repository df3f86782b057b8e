"""
v1 API 路由
"""
from browser_sessions.interfaces.rest.api.v1 import health, sessions

__all__ = [
    "health",
    "sessions",
]
