"""
浏览器配置

描述一个可启动的浏览器服务。配置加载时即完成类型校验，
镜像名必须是字符串，端口必须可解析。
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from browser_sessions.domain.entities.service_spec import ServiceSpec
from browser_sessions.domain.value_objects.port_spec import PortSpec
from browser_sessions.shared.errors.domain import InvalidPortSpecError

DEFAULT_SHM_SIZE = 268435456  # 256 MiB，Chrome 需要较大的 /dev/shm


class BrowserConfig(BaseModel):
    """单个浏览器服务配置"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    image: StrictStr = Field(min_length=1)
    port: str = Field(default="4444")
    path: str = Field(default="/wd/hub")
    shm_size: Optional[int] = Field(default=DEFAULT_SHM_SIZE, gt=0)
    privileged: bool = Field(default=True)
    hostname: Optional[str] = Field(default="localhost")

    @field_validator("port", mode="before")
    @classmethod
    def validate_port(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        try:
            PortSpec.parse(v)
        except InvalidPortSpecError as e:
            raise ValueError(e.message) from e
        return v

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"

    def to_service_spec(self) -> ServiceSpec:
        """转换为领域层的 ServiceSpec"""
        return ServiceSpec(
            image=self.image,
            port=self.port,
            path=self.path,
            shm_size=self.shm_size,
            privileged=self.privileged,
            hostname=self.hostname,
        )
