"""
服务入口

从环境变量加载配置，初始化日志并启动 HTTP 服务。
"""
import uvicorn

from browser_sessions.infrastructure.config.settings import get_settings
from browser_sessions.infrastructure.logging import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(log_level=settings.log_level, log_format=settings.log_format)

    from browser_sessions.interfaces.rest.main import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
