"""
Unit tests for the request guards.
"""
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from browser_sessions.interfaces.rest.middleware.request_guards import (
    CLOSE_NOTIFIER_ERROR,
    METHOD_NOT_ALLOWED_ERROR,
    ensure_close_notifier,
    ensure_post,
)


async def _receive():
    return {"type": "http.request", "body": b"", "more_body": False}


def make_request(method: str = "POST", with_receive: bool = True) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": "/api/v1/sessions",
        "headers": [],
        "query_string": b"",
    }
    if with_receive:
        return Request(scope, _receive)
    return Request(scope)


@pytest.fixture
def inner():
    return AsyncMock(return_value=PlainTextResponse("ok"))


class TestEnsurePost:
    """Method guard tests."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH", "HEAD"])
    async def test_rejects_non_post(self, inner, method):
        response = await ensure_post(inner)(make_request(method))

        assert response.status_code == 405
        assert response.body == METHOD_NOT_ALLOWED_ERROR.encode()
        inner.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_passes_post_through(self, inner):
        request = make_request("POST")

        response = await ensure_post(inner)(request)

        assert response is inner.return_value
        inner.assert_awaited_once_with(request)


class TestEnsureCloseNotifier:
    """Capability guard tests."""

    @pytest.mark.asyncio
    async def test_rejects_transport_without_disconnect_notifications(self, inner):
        response = await ensure_close_notifier(inner)(make_request(with_receive=False))

        assert response.status_code == 500
        assert response.body == CLOSE_NOTIFIER_ERROR.encode()
        inner.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_passes_through_when_supported(self, inner):
        request = make_request()

        response = await ensure_close_notifier(inner)(request)

        assert response is inner.return_value
        inner.assert_awaited_once_with(request)

    @pytest.mark.asyncio
    async def test_composed_guards(self, inner):
        guarded = ensure_close_notifier(ensure_post(inner))

        assert (await guarded(make_request("GET"))).status_code == 405
        assert (await guarded(make_request("POST", with_receive=False))).status_code == 500
        inner.assert_not_awaited()

        await guarded(make_request("POST"))
        inner.assert_awaited_once()
