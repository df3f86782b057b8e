"""
会话启动服务

编排单个浏览器容器的生命周期：
创建 -> 启动 -> 检查端口绑定 -> 等待就绪 -> 返回会话 URL 与 teardown。

每次调用独立持有自己的容器，调用之间没有共享的可变状态。
"""
import asyncio
import uuid
from typing import Optional

from browser_sessions.application.services.teardown import Teardown
from browser_sessions.domain.entities.service_spec import ServiceSpec
from browser_sessions.domain.entities.session import Session
from browser_sessions.domain.value_objects.port_spec import resolve_port
from browser_sessions.infrastructure.container_runtime.base import (
    ContainerCreateRequest,
    IContainerRuntime,
    PortBinding,
)
from browser_sessions.infrastructure.logging import get_logger
from browser_sessions.infrastructure.readiness.waiter import ReadinessWaiter
from browser_sessions.shared.errors.infrastructure import (
    ContainerRuntimeError,
    CreationFailedError,
    NotReadyError,
    PortBindingError,
    ReadinessTimeoutError,
    StartFailedError,
)


def build_session_url(binding: PortBinding, path: str) -> str:
    """由宿主机绑定与健康检查路径组成会话 URL"""
    host = binding.host_ip
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return f"http://{host}:{binding.host_port}{path}"


class SessionLauncher:
    """
    会话启动服务

    启动失败时不做自动清理：容器创建成功后的错误都携带 teardown，由调用方释放。
    只有当调用任务被取消时才会自动释放已创建的容器。
    """

    def __init__(
        self,
        runtime: IContainerRuntime,
        waiter: ReadinessWaiter,
        readiness_timeout: float = 10.0,
        bind_host_ip: str = "127.0.0.1",
        stop_timeout: Optional[int] = None,
        logger=None,
    ):
        self._runtime = runtime
        self._waiter = waiter
        self._readiness_timeout = readiness_timeout
        self._bind_host_ip = bind_host_ip
        self._stop_timeout = stop_timeout
        self._logger = logger or get_logger(__name__)

    async def start_session(self, spec: ServiceSpec) -> Session:
        """
        启动会话用例

        流程：
        1. 解析容器内端口
        2. 创建容器（端口只绑定回环地址，宿主机端口由运行时分配）
        3. 启动容器
        4. 检查端口绑定，必须恰好一个
        5. 组成候选 URL
        6. 等待就绪
        7. 返回会话

        Raises:
            InvalidPortSpecError: 端口规格无法解析
            CreationFailedError: 容器创建失败
            StartFailedError: 容器启动失败
            PortBindingError: 端口绑定数量不是一个
            NotReadyError: 截止时间内未就绪
        """
        # 1. 解析端口
        port_key = resolve_port(spec.port)

        # 2. 创建容器
        request = ContainerCreateRequest(
            image=spec.image,
            exposed_port=port_key,
            host_ip=self._bind_host_ip,
            auto_remove=True,
            shm_size=spec.shm_size,
            privileged=spec.privileged,
            hostname=spec.hostname,
        )
        # 创建请求发出后运行时总会完成创建，取消时也要拿到容器 ID 才能释放
        create = asyncio.ensure_future(self._runtime.create_container(request))
        try:
            container_id = await asyncio.shield(create)
        except asyncio.CancelledError:
            self._logger.warning("Session start cancelled during creation", image=spec.image)
            await asyncio.shield(self._release_created(create))
            raise
        except ContainerRuntimeError as e:
            raise CreationFailedError(
                f"Failed to create container from {spec.image}", original_error=e
            ) from e

        log = self._logger.bind(container_id=container_id, image=spec.image)
        log.info("Container created", port=port_key)
        teardown = self._teardown_for(container_id)

        try:
            return await self._bring_up(container_id, spec, port_key, teardown, log)
        except asyncio.CancelledError:
            log.warning("Session start cancelled, releasing container")
            await asyncio.shield(teardown())
            raise

    def _teardown_for(self, container_id: str) -> Teardown:
        return Teardown(
            self._runtime,
            container_id,
            stop_timeout=self._stop_timeout,
            logger=self._logger,
        )

    async def _release_created(self, create: "asyncio.Future[str]") -> None:
        """等待被放弃的创建请求完成，释放其创建的容器"""
        try:
            container_id = await create
        except ContainerRuntimeError:
            return
        await self._teardown_for(container_id)()

    async def _bring_up(
        self,
        container_id: str,
        spec: ServiceSpec,
        port_key: str,
        teardown: Teardown,
        log,
    ) -> Session:
        # 3. 启动容器
        try:
            await self._runtime.start_container(container_id)
        except ContainerRuntimeError as e:
            raise StartFailedError(
                f"Failed to start container {container_id}", original_error=e, teardown=teardown
            ) from e
        log.info("Container started")

        # 4. 检查端口绑定
        binding = await self._resolve_binding(container_id, port_key, teardown)
        log.info("Port binding resolved", host_ip=binding.host_ip, host_port=binding.host_port)

        # 5. 组成候选 URL
        url = build_session_url(binding, spec.path)

        # 6. 等待就绪
        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            await self._waiter.wait_ready(url, self._readiness_timeout)
        except ReadinessTimeoutError as e:
            raise NotReadyError(
                f"Container {container_id} is not ready", original_error=e, teardown=teardown
            ) from e
        log.info("Session ready", url=url, elapsed=f"{loop.time() - started:.3f}s")

        # 7. 返回会话
        return Session(
            id=self._generate_session_id(),
            url=url,
            image=spec.image,
            teardown=teardown,
        )

    async def _resolve_binding(
        self,
        container_id: str,
        port_key: str,
        teardown: Teardown,
    ) -> PortBinding:
        """返回容器端口唯一的宿主机绑定"""
        try:
            inspection = await self._runtime.inspect_container(container_id)
        except ContainerRuntimeError as e:
            raise PortBindingError(
                f"Unable to inspect container {container_id}", original_error=e, teardown=teardown
            ) from e

        bindings = inspection.bindings_for(port_key)
        if not bindings:
            raise PortBindingError(
                f"No bindings available for {port_key} on container {container_id}",
                teardown=teardown,
            )
        if len(bindings) != 1:
            raise PortBindingError(
                f"Wrong number of port bindings for {port_key} on container "
                f"{container_id}: {len(bindings)}",
                teardown=teardown,
            )
        return bindings[0]

    def _generate_session_id(self) -> str:
        return f"sess_{uuid.uuid4().hex[:16]}"
