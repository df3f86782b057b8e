"""
健康检查 REST API 路由
"""
import time

from fastapi import APIRouter, Request

from browser_sessions.interfaces.rest.schemas.response import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])

# 应用启动时间
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """健康检查端点"""
    return HealthResponse(
        status="healthy",
        version=request.app.state.settings.app_version,
        uptime=time.time() - _start_time,
    )
