"""
Docker 容器运行时

使用 aiodocker 实现浏览器容器的创建、启动、检查与销毁。

端口只发布到回环地址，宿主机端口由 Docker 动态分配，
容器启动后通过 inspect 获取实际绑定。
"""
from typing import Any, Dict, List, Optional

import aiohttp
from aiodocker import Docker
from aiodocker.exceptions import DockerError

from browser_sessions.infrastructure.container_runtime.base import (
    IContainerRuntime,
    ContainerCreateRequest,
    ContainerInspection,
    PortBinding,
)
from browser_sessions.infrastructure.logging import get_logger
from browser_sessions.shared.errors.infrastructure import (
    ContainerNotFoundError,
    ContainerRuntimeError,
)

logger = get_logger(__name__)


def _wrap_error(action: str, container_id: Optional[str], error: Exception) -> ContainerRuntimeError:
    """将 aiodocker / aiohttp 异常转换为运行时错误"""
    target = f" {container_id}" if container_id else ""
    if isinstance(error, DockerError):
        message = f"Failed to {action} container{target}: {error.message}"
        if error.status == 404:
            return ContainerNotFoundError(message, original_error=error)
        return ContainerRuntimeError(message, original_error=error)
    return ContainerRuntimeError(
        f"Failed to {action} container{target}: {error}", original_error=error
    )


class DockerRuntime(IContainerRuntime):
    """
    Docker 容器运行时

    通过 Docker socket 或 TCP 连接 Docker daemon。
    """

    def __init__(self, docker_url: str = "unix:///var/run/docker.sock"):
        """
        初始化 Docker 运行时

        Args:
            docker_url: Docker daemon 连接URL
                - unix:///var/run/docker.sock (Unix socket)
                - tcp://localhost:2375 (TCP)
        """
        self._docker_url = docker_url
        self._docker: Optional[Docker] = None
        self._initialized = False

    async def _ensure_docker(self) -> Docker:
        """确保 Docker 客户端已初始化"""
        if not self._initialized:
            self._docker = Docker(url=self._docker_url)
            self._initialized = True
        return self._docker

    async def close(self) -> None:
        """关闭 Docker 连接"""
        if self._docker:
            await self._docker.close()
            self._docker = None
            self._initialized = False

    def _build_container_config(self, request: ContainerCreateRequest) -> Dict[str, Any]:
        """
        构建容器配置

        - ExposedPorts: 仅暴露服务端口
        - PortBindings: HostIp 为回环地址，HostPort 为空（由 Docker 分配）
        - AutoRemove: 停止后自动删除
        - 不指定网络配置，使用默认网络
        """
        host_config: Dict[str, Any] = {
            "AutoRemove": request.auto_remove,
            "PortBindings": {
                request.exposed_port: [{"HostIp": request.host_ip, "HostPort": ""}],
            },
            "Privileged": request.privileged,
        }
        if request.shm_size is not None:
            host_config["ShmSize"] = request.shm_size

        config: Dict[str, Any] = {
            "Image": request.image,
            "ExposedPorts": {request.exposed_port: {}},
            "HostConfig": host_config,
        }
        if request.hostname:
            config["Hostname"] = request.hostname
        return config

    async def create_container(self, request: ContainerCreateRequest) -> str:
        """创建 Docker 容器"""
        docker = await self._ensure_docker()
        container_config = self._build_container_config(request)
        try:
            container = await docker.containers.create(container_config)
        except (DockerError, aiohttp.ClientError) as e:
            logger.error("Failed to create container", image=request.image, error=str(e))
            raise _wrap_error("create", None, e) from e
        logger.debug("Docker container created", container_id=container.id, image=request.image)
        return container.id

    async def start_container(self, container_id: str) -> None:
        """启动容器"""
        docker = await self._ensure_docker()
        try:
            container = docker.containers.container(container_id)
            await container.start()
        except (DockerError, aiohttp.ClientError) as e:
            logger.error("Failed to start container", container_id=container_id, error=str(e))
            raise _wrap_error("start", container_id, e) from e

    async def inspect_container(self, container_id: str) -> ContainerInspection:
        """获取容器网络端口信息"""
        docker = await self._ensure_docker()
        try:
            container = docker.containers.container(container_id)
            info = await container.show()
        except (DockerError, aiohttp.ClientError) as e:
            logger.error("Failed to inspect container", container_id=container_id, error=str(e))
            raise _wrap_error("inspect", container_id, e) from e

        return ContainerInspection(
            id=container_id,
            status=(info.get("State") or {}).get("Status", "unknown"),
            ports=self._parse_ports(info),
        )

    @staticmethod
    def _parse_ports(info: Dict[str, Any]) -> Dict[str, List[PortBinding]]:
        """
        解析 NetworkSettings.Ports

        未发布的端口在 Docker 中的值为 null。
        """
        raw_ports = (info.get("NetworkSettings") or {}).get("Ports") or {}
        ports: Dict[str, List[PortBinding]] = {}
        for port_key, bindings in raw_ports.items():
            ports[port_key] = [
                PortBinding(host_ip=b.get("HostIp", ""), host_port=str(b.get("HostPort", "")))
                for b in bindings or []
            ]
        return ports

    async def stop_container(
        self,
        container_id: str,
        timeout: Optional[int] = None
    ) -> None:
        """停止容器"""
        docker = await self._ensure_docker()
        params = {"t": timeout} if timeout is not None else {}
        try:
            container = docker.containers.container(container_id)
            await container.stop(**params)
        except (DockerError, aiohttp.ClientError) as e:
            raise _wrap_error("stop", container_id, e) from e

    async def wait_container(self, container_id: str) -> int:
        """等待容器退出"""
        docker = await self._ensure_docker()
        try:
            container = docker.containers.container(container_id)
            result = await container.wait()
        except (DockerError, aiohttp.ClientError) as e:
            raise _wrap_error("wait for", container_id, e) from e
        return result.get("StatusCode", -1)

    async def remove_container(
        self,
        container_id: str,
        force: bool = True
    ) -> None:
        """删除容器"""
        docker = await self._ensure_docker()
        try:
            container = docker.containers.container(container_id)
            await container.delete(force=force)
        except (DockerError, aiohttp.ClientError) as e:
            raise _wrap_error("remove", container_id, e) from e
