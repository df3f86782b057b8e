"""
配置包
"""
from browser_sessions.infrastructure.config.browsers import BrowserConfig
from browser_sessions.infrastructure.config.settings import Settings, get_settings

__all__ = [
    "BrowserConfig",
    "Settings",
    "get_settings",
]
