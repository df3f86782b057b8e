"""
基础设施错误

定义基础设施层的错误类型，以及会话启动过程中的错误。
"""
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from browser_sessions.application.services.teardown import Teardown


class InfrastructureError(Exception):
    """基础设施错误基类"""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class ContainerRuntimeError(InfrastructureError):
    """容器运行时调用失败"""
    pass


class ContainerNotFoundError(ContainerRuntimeError):
    """容器不存在（已被删除）"""
    pass


class ReadinessTimeoutError(InfrastructureError):
    """就绪检查超时"""

    def __init__(
        self,
        url: str,
        deadline: float,
        original_error: Optional[Exception] = None
    ):
        self.url = url
        self.deadline = deadline
        reason = f": {original_error}" if original_error else ""
        super().__init__(
            f"{url} did not respond within {deadline}s{reason}",
            original_error=original_error,
        )


# ============== 会话启动错误 ==============


class SessionLaunchError(InfrastructureError):
    """
    会话启动错误基类

    容器创建成功之后出现的错误会携带 teardown，
    由调用方决定何时释放容器。
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        teardown: Optional["Teardown"] = None,
    ):
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(message, original_error=original_error)
        self.teardown = teardown


class CreationFailedError(SessionLaunchError):
    """容器创建失败（未创建任何资源）"""
    pass


class StartFailedError(SessionLaunchError):
    """容器已创建但启动失败"""
    pass


class PortBindingError(SessionLaunchError):
    """端口绑定数量不是一个"""
    pass


class NotReadyError(SessionLaunchError):
    """容器内服务未在截止时间内就绪"""
    pass
