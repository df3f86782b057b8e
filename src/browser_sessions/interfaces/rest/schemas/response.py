"""
响应模型
"""
from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str
    version: str
    uptime: float


class SessionResponse(BaseModel):
    """会话响应"""
    id: str
    url: str
    image: str
    started_at: datetime


class ErrorResponse(BaseModel):
    """错误响应"""
    detail: str
