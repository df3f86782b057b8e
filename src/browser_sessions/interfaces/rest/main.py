"""
FastAPI 主应用

浏览器会话服务的 FastAPI 应用入口。
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from browser_sessions.application.services.session_registry import SessionRegistry
from browser_sessions.infrastructure.config.settings import Settings, get_settings
from browser_sessions.infrastructure.container_runtime.base import IContainerRuntime
from browser_sessions.infrastructure.dependencies import build_launcher, build_runtime
from browser_sessions.infrastructure.logging import get_logger
from browser_sessions.infrastructure.readiness.waiter import ReadinessWaiter
from browser_sessions.interfaces.rest.api.v1 import health, sessions
from browser_sessions.interfaces.rest.middleware.logging_middleware import RequestLoggingMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    应用生命周期管理

    关闭时释放所有未释放的会话并关闭运行时连接。
    """
    logger.info("Starting browser session launcher", browsers=sorted(app.state.settings.browsers))

    yield

    logger.info("Shutting down browser session launcher")
    released = await app.state.registry.release_all()
    if released:
        logger.info("Released sessions on shutdown", count=released)
    await app.state.runtime.close()


def create_app(
    settings: Optional[Settings] = None,
    runtime: Optional[IContainerRuntime] = None,
    waiter: Optional[ReadinessWaiter] = None,
) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        settings: 应用配置，缺省从环境变量加载
        runtime: 容器运行时，缺省使用 Docker
        waiter: 就绪等待器，缺省按配置创建
    """
    settings = settings or get_settings()
    runtime = runtime or build_runtime(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.runtime = runtime
    app.state.launcher = build_launcher(settings, runtime=runtime, waiter=waiter)
    app.state.registry = SessionRegistry()

    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router)
    app.include_router(sessions.router, prefix="/api/v1")

    return app
