"""
请求模型
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateSessionRequest(BaseModel):
    """创建会话请求"""

    model_config = ConfigDict(extra="ignore")

    browser: Optional[str] = Field(default=None, min_length=1, description="浏览器名称，缺省使用默认浏览器")
