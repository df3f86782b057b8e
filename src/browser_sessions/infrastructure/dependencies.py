"""
依赖注入配置

根据配置构建容器运行时、就绪等待器与会话启动服务。
"""
from typing import Optional

from browser_sessions.application.services.session_launcher import SessionLauncher
from browser_sessions.infrastructure.config.settings import Settings
from browser_sessions.infrastructure.container_runtime.base import IContainerRuntime
from browser_sessions.infrastructure.container_runtime.docker_runtime import DockerRuntime
from browser_sessions.infrastructure.logging import get_logger
from browser_sessions.infrastructure.readiness.waiter import ReadinessWaiter

logger = get_logger(__name__)


def build_runtime(settings: Settings) -> IContainerRuntime:
    """创建 Docker 运行时（连接延迟到首次调用）"""
    logger.info("Using Docker URL", docker_host=settings.docker_host)
    return DockerRuntime(docker_url=settings.docker_host)


def build_waiter(settings: Settings) -> ReadinessWaiter:
    return ReadinessWaiter(
        poll_interval=settings.readiness_poll_interval_seconds,
        request_timeout=settings.readiness_request_timeout_seconds,
    )


def build_launcher(
    settings: Settings,
    runtime: Optional[IContainerRuntime] = None,
    waiter: Optional[ReadinessWaiter] = None,
) -> SessionLauncher:
    return SessionLauncher(
        runtime=runtime or build_runtime(settings),
        waiter=waiter or build_waiter(settings),
        readiness_timeout=settings.readiness_timeout_seconds,
        bind_host_ip=settings.bind_host_ip,
        stop_timeout=settings.stop_timeout_seconds,
    )
