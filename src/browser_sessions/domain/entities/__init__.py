"""
领域实体
"""
from browser_sessions.domain.entities.service_spec import ServiceSpec
from browser_sessions.domain.entities.session import Session

__all__ = [
    "ServiceSpec",
    "Session",
]
