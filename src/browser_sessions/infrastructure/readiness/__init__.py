"""
就绪检查包
"""
from browser_sessions.infrastructure.readiness.waiter import ReadinessWaiter

__all__ = [
    "ReadinessWaiter",
]
