"""
值对象
"""
from browser_sessions.domain.value_objects.port_spec import PortSpec, resolve_port

__all__ = [
    "PortSpec",
    "resolve_port",
]
