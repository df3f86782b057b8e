"""
应用服务
"""
from browser_sessions.application.services.session_launcher import SessionLauncher
from browser_sessions.application.services.session_registry import SessionRegistry
from browser_sessions.application.services.teardown import Teardown

__all__ = [
    "SessionLauncher",
    "SessionRegistry",
    "Teardown",
]
