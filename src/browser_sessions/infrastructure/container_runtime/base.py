"""
容器运行时接口

定义会话生命周期所需的容器操作抽象接口。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ContainerCreateRequest:
    """容器创建请求"""
    image: str
    exposed_port: str  # 运行时端口键，如 "4444/tcp"
    host_ip: str = "127.0.0.1"  # 端口只绑定到回环地址
    auto_remove: bool = True
    shm_size: Optional[int] = None
    privileged: bool = False
    hostname: Optional[str] = None


@dataclass(frozen=True)
class PortBinding:
    """宿主机端口绑定"""
    host_ip: str
    host_port: str


@dataclass
class ContainerInspection:
    """容器检查结果（仅包含网络端口信息）"""
    id: str
    status: str
    ports: Dict[str, List[PortBinding]] = field(default_factory=dict)

    def bindings_for(self, port_key: str) -> List[PortBinding]:
        """返回指定容器端口的全部宿主机绑定"""
        return list(self.ports.get(port_key) or [])


class IContainerRuntime(ABC):
    """
    容器运行时接口

    每个调用在调用方看来都是独立的原子操作。
    """

    @abstractmethod
    async def create_container(self, request: ContainerCreateRequest) -> str:
        """
        创建容器

        返回容器ID
        """
        pass

    @abstractmethod
    async def start_container(self, container_id: str) -> None:
        """启动容器"""
        pass

    @abstractmethod
    async def inspect_container(self, container_id: str) -> ContainerInspection:
        """检查容器网络状态"""
        pass

    @abstractmethod
    async def stop_container(
        self,
        container_id: str,
        timeout: Optional[int] = None
    ) -> None:
        """停止容器，timeout 为 None 时使用运行时默认值"""
        pass

    @abstractmethod
    async def wait_container(self, container_id: str) -> int:
        """等待容器退出，返回退出码"""
        pass

    @abstractmethod
    async def remove_container(
        self,
        container_id: str,
        force: bool = True
    ) -> None:
        """删除容器"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """关闭运行时连接"""
        pass
