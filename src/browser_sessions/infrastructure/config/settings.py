"""
应用配置

使用 Pydantic Settings 管理应用配置。
"""
from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from browser_sessions.infrastructure.config.browsers import BrowserConfig


def _default_browsers() -> Dict[str, BrowserConfig]:
    return {
        "chrome": BrowserConfig(image="selenium/standalone-chrome:latest"),
        "firefox": BrowserConfig(image="selenium/standalone-firefox:latest"),
    }


class Settings(BaseSettings):
    """应用配置类"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============== 应用配置 ==============
    app_name: str = Field(default="Browser Session Launcher")
    app_version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)

    # ============== 服务器配置 ==============
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4444)

    # ============== Docker 配置 ==============
    docker_host: str = Field(default="unix:///var/run/docker.sock")
    bind_host_ip: str = Field(default="127.0.0.1")  # 容器端口只发布到回环地址
    stop_timeout_seconds: Optional[int] = Field(default=None, ge=0)  # None 表示使用 Docker 默认值

    # ============== 就绪检查配置 ==============
    readiness_timeout_seconds: float = Field(default=10.0, gt=0)
    readiness_poll_interval_seconds: float = Field(default=0.1, gt=0)
    readiness_request_timeout_seconds: float = Field(default=1.0, gt=0)

    # ============== 浏览器配置 ==============
    browsers: Dict[str, BrowserConfig] = Field(default_factory=_default_browsers)
    default_browser: str = Field(default="chrome")

    # ============== 日志配置 ==============
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text")  # json, text (default: text for human-readable)

    @field_validator("docker_host")
    @classmethod
    def validate_docker_host(cls, v: str) -> str:
        # 确保 docker_host 有正确的协议前缀
        if not v.startswith(("unix://", "tcp://", "http://", "https://")):
            return f"unix://{v}"
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"json", "text"}
        if v not in allowed:
            raise ValueError(f"log_format must be one of {allowed}")
        return v

    @model_validator(mode="after")
    def validate_default_browser(self) -> "Settings":
        if self.default_browser not in self.browsers:
            raise ValueError(
                f"default_browser {self.default_browser!r} is not configured in browsers"
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    """
    获取配置单例

    使用 lru_cache 确保配置只加载一次。
    """
    return Settings()
