"""
会话实体

表示一个已就绪的浏览器会话：可访问的 URL 以及释放容器的 teardown。
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from browser_sessions.application.services.teardown import Teardown


@dataclass
class Session:
    """
    会话实体

    URL 的主机与端口来自运行时动态分配的端口绑定，而不是 ServiceSpec 中声明的容器内端口。
    容器 ID 由 teardown 持有，不对外暴露。
    """
    id: str
    url: str
    image: str
    teardown: "Teardown" = field(repr=False)
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def released(self) -> bool:
        return self.teardown.released

    async def close(self) -> None:
        """释放会话占用的容器"""
        await self.teardown()
