"""
Pytest 配置文件

提供容器运行时替身与常用服务规格。
"""
from unittest.mock import AsyncMock, Mock

import pytest

from browser_sessions.domain.entities.service_spec import ServiceSpec
from browser_sessions.infrastructure.container_runtime.base import PortBinding

from tests.helpers import CONTAINER_ID, make_inspection


@pytest.fixture
def runtime():
    """模拟容器运行时"""
    runtime = Mock()
    runtime.create_container = AsyncMock(return_value=CONTAINER_ID)
    runtime.start_container = AsyncMock()
    runtime.inspect_container = AsyncMock(
        return_value=make_inspection(PortBinding(host_ip="127.0.0.1", host_port="32768"))
    )
    runtime.stop_container = AsyncMock()
    runtime.wait_container = AsyncMock(return_value=0)
    runtime.remove_container = AsyncMock()
    runtime.close = AsyncMock()
    return runtime


@pytest.fixture
def waiter():
    """模拟就绪等待器（立即就绪）"""
    waiter = Mock()
    waiter.wait_ready = AsyncMock()
    return waiter


@pytest.fixture
def mock_logger():
    """模拟 structlog logger，bind 返回自身"""
    logger = Mock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def browser_spec():
    """浏览器服务规格"""
    return ServiceSpec(
        image="browser:1.0",
        port="4444/tcp",
        path="/wd/hub",
        shm_size=268435456,
        privileged=True,
    )
