"""
就绪等待器单元测试
"""
import asyncio
import time

import httpx
import pytest

from browser_sessions.infrastructure.readiness.waiter import ReadinessWaiter
from browser_sessions.shared.errors.infrastructure import ReadinessTimeoutError

URL = "http://127.0.0.1:32768/wd/hub"


class CountingHandler:
    """前 failures 次请求连接失败，之后返回 status_code"""

    def __init__(self, failures: int = 0, status_code: int = 200):
        self.failures = failures
        self.status_code = status_code
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.calls <= self.failures:
            raise httpx.ConnectError("Connection refused", request=request)
        return httpx.Response(self.status_code)


class TestReadinessWaiter:
    """就绪等待器测试"""

    @pytest.mark.asyncio
    async def test_ready_on_first_response(self):
        handler = CountingHandler()
        waiter = ReadinessWaiter(poll_interval=0.01, transport=httpx.MockTransport(handler))

        await waiter.wait_ready(URL, deadline=5.0)

        assert handler.calls == 1

    @pytest.mark.asyncio
    async def test_any_status_counts_as_ready(self):
        handler = CountingHandler(status_code=503)
        waiter = ReadinessWaiter(poll_interval=0.01, transport=httpx.MockTransport(handler))

        await waiter.wait_ready(URL, deadline=5.0)

        assert handler.calls == 1

    @pytest.mark.asyncio
    async def test_polls_until_response(self):
        handler = CountingHandler(failures=3)
        waiter = ReadinessWaiter(poll_interval=0.01, transport=httpx.MockTransport(handler))

        start = time.monotonic()
        await waiter.wait_ready(URL, deadline=5.0)

        assert handler.calls == 4
        assert time.monotonic() - start < 1.0

    @pytest.mark.asyncio
    async def test_timeout(self):
        handler = CountingHandler(failures=10_000)
        waiter = ReadinessWaiter(poll_interval=0.05, transport=httpx.MockTransport(handler))

        start = time.monotonic()
        with pytest.raises(ReadinessTimeoutError) as exc_info:
            await waiter.wait_ready(URL, deadline=0.3)
        elapsed = time.monotonic() - start

        assert elapsed >= 0.25
        assert elapsed < 0.3 + 0.05 + 0.2
        assert exc_info.value.url == URL
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert handler.calls > 1

    @pytest.mark.asyncio
    async def test_hanging_endpoint_bounded_by_deadline(self):
        async def hang(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(10)
            return httpx.Response(200)

        waiter = ReadinessWaiter(poll_interval=0.05, request_timeout=5.0, transport=httpx.MockTransport(hang))

        start = time.monotonic()
        with pytest.raises(ReadinessTimeoutError):
            await waiter.wait_ready(URL, deadline=0.2)

        assert time.monotonic() - start < 0.2 + 0.05 + 0.2

    @pytest.mark.asyncio
    async def test_cancellation(self):
        handler = CountingHandler(failures=10_000)
        waiter = ReadinessWaiter(poll_interval=0.01, transport=httpx.MockTransport(handler))

        task = asyncio.create_task(waiter.wait_ready(URL, deadline=10.0))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
