"""
请求日志中间件单元测试
"""
from unittest.mock import Mock

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from browser_sessions.interfaces.rest.middleware import logging_middleware
from browser_sessions.interfaces.rest.middleware.logging_middleware import (
    RequestLoggingMiddleware,
    resolve_request_id,
)


@pytest.fixture
def middleware_logger(monkeypatch):
    logger = Mock()
    monkeypatch.setattr(logging_middleware, "logger", logger)
    return logger


@pytest.fixture
def client():
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.post("/launch")
    async def launch(request: Request):
        request.state.browser = "chrome"
        request.state.session_id = "sess_abc"
        return JSONResponse({"ok": True}, status_code=201)

    @app.get("/broken")
    async def broken():
        return JSONResponse({"detail": "bad gateway"}, status_code=502)

    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


class TestResolveRequestId:
    """请求 ID 解析测试"""

    def test_inbound_id_reused(self):
        assert resolve_request_id("proxy-42.a:b") == "proxy-42.a:b"

    @pytest.mark.parametrize("value", [None, "", "has space", "x" * 129, "bad\nid"])
    def test_invalid_inbound_id_replaced(self, value):
        request_id = resolve_request_id(value)

        assert request_id != value
        assert len(request_id) == 32


@pytest.mark.asyncio
class TestRequestLoggingMiddleware:
    """请求日志中间件测试"""

    async def test_inbound_request_id_echoed(self, client, middleware_logger):
        async with client:
            response = await client.post("/launch", headers={"X-Request-ID": "front-door-1"})

        assert response.headers["X-Request-ID"] == "front-door-1"
        assert "X-Process-Time" in response.headers

    async def test_request_id_generated(self, client, middleware_logger):
        async with client:
            response = await client.post("/launch")

        assert len(response.headers["X-Request-ID"]) == 32

    async def test_session_fields_logged(self, client, middleware_logger):
        async with client:
            await client.post("/launch")

        middleware_logger.info.assert_called_once()
        args, kwargs = middleware_logger.info.call_args
        assert args == ("Request completed",)
        assert kwargs["status_code"] == 201
        assert kwargs["browser"] == "chrome"
        assert kwargs["session_id"] == "sess_abc"

    async def test_server_errors_logged_as_error(self, client, middleware_logger):
        async with client:
            await client.get("/broken")

        middleware_logger.info.assert_not_called()
        _, kwargs = middleware_logger.error.call_args
        assert kwargs["status_code"] == 502
        assert "session_id" not in kwargs
