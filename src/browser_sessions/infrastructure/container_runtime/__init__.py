"""
容器运行时包

提供 Docker 容器运行时能力。
"""
from browser_sessions.infrastructure.container_runtime.base import (
    IContainerRuntime,
    ContainerCreateRequest,
    ContainerInspection,
    PortBinding,
)
from browser_sessions.infrastructure.container_runtime.docker_runtime import DockerRuntime

__all__ = [
    "IContainerRuntime",
    "ContainerCreateRequest",
    "ContainerInspection",
    "PortBinding",
    "DockerRuntime",
]
