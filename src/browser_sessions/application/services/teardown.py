"""
容器释放能力

随会话一起返回，调用一次即停止并删除对应容器。释放失败只记录日志，不向调用方抛出。
"""
import asyncio
from typing import Optional

from browser_sessions.infrastructure.container_runtime.base import IContainerRuntime
from browser_sessions.infrastructure.logging import get_logger
from browser_sessions.shared.errors.infrastructure import (
    ContainerNotFoundError,
    ContainerRuntimeError,
)

# 首次删除失败后最多再尝试一次
REMOVE_ATTEMPTS = 2


class Teardown:
    """
    容器释放能力

    创建后即不可变地绑定到一个容器 ID。
    流程：停止（失败则记录并继续） -> 等待退出 -> 强制删除。
    """

    def __init__(
        self,
        runtime: IContainerRuntime,
        container_id: str,
        stop_timeout: Optional[int] = None,
        logger=None,
    ):
        self._runtime = runtime
        self._container_id = container_id
        self._stop_timeout = stop_timeout
        self._logger = (logger or get_logger(__name__)).bind(container_id=container_id)
        self._release_task: Optional[asyncio.Task] = None

    @property
    def released(self) -> bool:
        return self._release_task is not None

    def __repr__(self) -> str:
        return f"Teardown(container_id={self._container_id!r}, released={self.released})"

    async def __call__(self) -> None:
        """
        释放容器

        释放流程在独立任务中运行并受 shield 保护：调用方被取消时停止与删除仍会完成。
        重复调用不会再次释放，只等待已有的释放任务结束。
        """
        if self._release_task is None:
            self._release_task = asyncio.ensure_future(self._release())
        else:
            self._logger.debug("Teardown already invoked")
        await asyncio.shield(self._release_task)

    async def _release(self) -> None:
        self._logger.info("Stopping container")
        stopped = await self._stop()
        if stopped:
            await self._wait()
        await self._remove()

    async def _stop(self) -> bool:
        try:
            await self._runtime.stop_container(self._container_id, timeout=self._stop_timeout)
        except ContainerRuntimeError as e:
            self._logger.warning("Container stop failed", error=str(e))
            return False
        self._logger.info("Container stopped")
        return True

    async def _wait(self) -> None:
        try:
            exit_code = await self._runtime.wait_container(self._container_id)
        except ContainerNotFoundError:
            # AutoRemove 已经删除了容器
            return
        except ContainerRuntimeError as e:
            self._logger.warning("Container wait failed", error=str(e))
            return
        self._logger.debug("Container exited", exit_code=exit_code)

    async def _remove(self) -> None:
        for attempt in range(1, REMOVE_ATTEMPTS + 1):
            try:
                await self._runtime.remove_container(self._container_id, force=True)
            except ContainerNotFoundError:
                self._logger.info("Container removed", auto_removed=True)
                return
            except ContainerRuntimeError as e:
                self._logger.warning("Container remove failed", attempt=attempt, error=str(e))
                continue
            self._logger.info("Container removed")
            return

        self._logger.error("Giving up removing container", attempts=REMOVE_ATTEMPTS)
