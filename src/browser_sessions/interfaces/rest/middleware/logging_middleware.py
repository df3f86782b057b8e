"""
请求日志中间件

为每个请求绑定 request_id 到 structlog 上下文，并在请求结束时记录会话启动结果。
前置代理已经分配的 X-Request-ID 会被沿用，便于跨代理与启动服务关联日志。
"""
import re
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from browser_sessions.infrastructure.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

# 处理器写入 request.state 的会话字段
SESSION_STATE_FIELDS = ("browser", "session_id")


def resolve_request_id(header_value: Optional[str]) -> str:
    """沿用合法的上游请求 ID，否则生成新的"""
    if header_value and _REQUEST_ID_PATTERN.match(header_value):
        return header_value
    return uuid.uuid4().hex


def session_fields(request: Request) -> dict:
    """收集处理器记录在 request.state 上的会话字段"""
    fields = {}
    for name in SESSION_STATE_FIELDS:
        value = getattr(request.state, name, None)
        if value is not None:
            fields[name] = value
    return fields


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    请求日志中间件

    - 沿用或生成 request_id 并绑定到日志上下文
    - 响应头回写 X-Request-ID 与 X-Process-Time
    - 请求结束时带上浏览器与会话 ID 记录结果，5xx 记为 error
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        bind_context(request_id=request_id, method=request.method, path=request.url.path)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            process_time = time.perf_counter() - start_time

            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers[PROCESS_TIME_HEADER] = f"{process_time:.3f}"

            log = logger.error if response.status_code >= 500 else logger.info
            log(
                "Request completed",
                status_code=response.status_code,
                process_time=f"{process_time:.3f}s",
                **session_fields(request),
            )
            return response

        except Exception as e:
            logger.exception(
                "Request failed",
                error=str(e),
                process_time=f"{time.perf_counter() - start_time:.3f}s",
                **session_fields(request),
            )
            raise

        finally:
            clear_context()
