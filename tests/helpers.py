"""
测试辅助函数
"""
from browser_sessions.infrastructure.container_runtime.base import (
    ContainerInspection,
    PortBinding,
)

CONTAINER_ID = "container-123"


def make_inspection(*bindings: PortBinding, port_key: str = "4444/tcp") -> ContainerInspection:
    """构造检查结果"""
    return ContainerInspection(
        id=CONTAINER_ID,
        status="running",
        ports={port_key: list(bindings)},
    )
