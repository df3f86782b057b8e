"""
就绪等待器

容器启动完成并不代表容器内服务已经可以接受连接。
按固定间隔请求候选 URL，收到任意 HTTP 响应即视为就绪（不检查状态码）。
"""
import asyncio
from typing import Optional

import httpx

from browser_sessions.infrastructure.logging import get_logger
from browser_sessions.shared.errors.infrastructure import ReadinessTimeoutError

logger = get_logger(__name__)


class ReadinessWaiter:
    """
    就绪等待器

    固定轮询间隔，无退避。总耗时不超过 deadline + poll_interval。
    """

    def __init__(
        self,
        poll_interval: float = 0.1,
        request_timeout: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        初始化就绪等待器

        Args:
            poll_interval: 两次请求之间的间隔（秒）
            request_timeout: 单次请求超时（秒），不会超过剩余截止时间
            transport: 自定义 httpx 传输层（测试用）
        """
        self._poll_interval = poll_interval
        self._request_timeout = request_timeout
        self._transport = transport

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    async def wait_ready(self, url: str, deadline: float) -> None:
        """
        等待 URL 可响应

        Args:
            url: 候选 URL
            deadline: 最长等待时间（秒）

        Raises:
            ReadinessTimeoutError: 截止时间内未收到任何响应
        """
        loop = asyncio.get_running_loop()
        expires_at = loop.time() + deadline
        attempts = 0
        last_error: Optional[Exception] = None

        async with httpx.AsyncClient(transport=self._transport, trust_env=False) as client:
            while True:
                remaining = expires_at - loop.time()
                if remaining <= 0:
                    break

                attempts += 1
                try:
                    response = await asyncio.wait_for(
                        client.get(url, timeout=min(self._request_timeout, remaining)),
                        timeout=remaining,
                    )
                except (httpx.TransportError, asyncio.TimeoutError) as e:
                    last_error = e
                else:
                    logger.debug(
                        "Endpoint responded",
                        url=url,
                        status_code=response.status_code,
                        attempts=attempts,
                    )
                    return

                remaining = expires_at - loop.time()
                if remaining <= 0:
                    break
                await asyncio.sleep(min(self._poll_interval, remaining))

        logger.warning("Endpoint not ready before deadline", url=url, deadline=deadline, attempts=attempts)
        raise ReadinessTimeoutError(url, deadline, original_error=last_error)
