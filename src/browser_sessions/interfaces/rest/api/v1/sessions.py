"""
会话 REST API 路由

创建会话的端点接受所有 HTTP 方法，由请求守卫拒绝非 POST 请求，
并要求传输层能够通知客户端断开：客户端断开时取消正在进行的启动。
"""
import asyncio
import json

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from browser_sessions.application.services.session_launcher import SessionLauncher
from browser_sessions.application.services.session_registry import SessionRegistry
from browser_sessions.domain.entities.service_spec import ServiceSpec
from browser_sessions.domain.entities.session import Session
from browser_sessions.infrastructure.logging import get_logger
from browser_sessions.interfaces.rest.middleware.request_guards import (
    ensure_close_notifier,
    ensure_post,
)
from browser_sessions.interfaces.rest.schemas.request import CreateSessionRequest
from browser_sessions.interfaces.rest.schemas.response import SessionResponse
from browser_sessions.shared.errors.domain import InvalidPortSpecError, NotFoundError
from browser_sessions.shared.errors.infrastructure import SessionLaunchError

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

# nginx 约定：客户端在响应前关闭了连接
CLIENT_CLOSED_REQUEST = 499


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse({"detail": detail}, status_code=status_code)


def _to_response(session: Session) -> SessionResponse:
    return SessionResponse(
        id=session.id,
        url=session.url,
        image=session.image,
        started_at=session.started_at,
    )


async def _read_request(request: Request) -> CreateSessionRequest:
    body = await request.body()
    if not body.strip():
        return CreateSessionRequest()
    return CreateSessionRequest.model_validate(json.loads(body))


async def _wait_for_disconnect(request: Request) -> None:
    """阻塞直到传输层报告客户端断开"""
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


async def _launch_until_disconnect(
    request: Request,
    launcher: SessionLauncher,
    spec: ServiceSpec,
) -> Session | None:
    """
    启动会话，客户端断开时取消启动

    Returns:
        会话；客户端已断开时返回 None
    """
    launch = asyncio.create_task(launcher.start_session(spec))
    disconnect = asyncio.create_task(_wait_for_disconnect(request))
    try:
        done, _ = await asyncio.wait({launch, disconnect}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        launch.cancel()
        raise
    finally:
        disconnect.cancel()
        await asyncio.gather(disconnect, return_exceptions=True)

    if disconnect not in done:
        return launch.result()

    # 客户端已断开：取消后启动服务自行释放已创建的容器；已完成的会话在这里释放
    launch.cancel()
    try:
        await launch
    except asyncio.CancelledError:
        pass
    except SessionLaunchError as e:
        if e.teardown is not None:
            await e.teardown()
    else:
        await launch.result().close()
    return None


async def create_session(request: Request) -> Response:
    """创建会话：启动容器并等待就绪"""
    settings = request.app.state.settings
    launcher: SessionLauncher = request.app.state.launcher
    registry: SessionRegistry = request.app.state.registry

    try:
        payload = await _read_request(request)
    except json.JSONDecodeError as e:
        return _error(status.HTTP_400_BAD_REQUEST, f"Invalid JSON body: {e}")
    except PydanticValidationError as e:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(e))

    browser = payload.browser or settings.default_browser
    request.state.browser = browser
    browser_config = settings.browsers.get(browser)
    if browser_config is None:
        return _error(status.HTTP_404_NOT_FOUND, f"Browser not found: {browser}")

    try:
        session = await _launch_until_disconnect(request, launcher, browser_config.to_service_spec())
    except InvalidPortSpecError as e:
        logger.error("Invalid browser port configuration", browser=browser, error=e.message)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message)
    except SessionLaunchError as e:
        logger.error("Failed to start session", browser=browser, error=e.message)
        if e.teardown is not None:
            await e.teardown()
        return _error(status.HTTP_502_BAD_GATEWAY, e.message)

    if session is None:
        logger.info("Client disconnected, session start cancelled", browser=browser)
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    registry.add(session)
    request.state.session_id = session.id
    logger.info("Session created", session_id=session.id, browser=browser, url=session.url)
    return JSONResponse(
        _to_response(session).model_dump(mode="json"),
        status_code=status.HTTP_201_CREATED,
    )


# add_route 注册的是 Starlette 路由，不会自动加上 router 前缀。
# 未指定 methods 时 Starlette 只接受 GET/HEAD，这里列出全部方法，由 ensure_post 判断
SESSION_ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router.add_route(
    "/sessions",
    ensure_close_notifier(ensure_post(create_session)),
    methods=SESSION_ROUTE_METHODS,
    include_in_schema=False,
)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, request: Request) -> Response:
    """释放会话"""
    registry: SessionRegistry = request.app.state.registry
    try:
        await registry.release(session_id)
    except NotFoundError as e:
        return _error(status.HTTP_404_NOT_FOUND, e.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
