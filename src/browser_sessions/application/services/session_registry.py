"""
会话登记表

进程内保存尚未释放的会话，供代理层按 ID 查找与释放。不做持久化。
"""
import asyncio
from typing import Dict, List, Optional

from browser_sessions.domain.entities.session import Session
from browser_sessions.infrastructure.logging import get_logger
from browser_sessions.shared.errors.domain import NotFoundError

logger = get_logger(__name__)


class SessionRegistry:
    """进程内会话登记表"""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def add(self, session: Session) -> None:
        self._sessions[session.id] = session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def list(self) -> List[Session]:
        return list(self._sessions.values())

    async def release(self, session_id: str) -> None:
        """移出登记表并释放容器"""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise NotFoundError(f"Session not found: {session_id}")
        await session.close()

    async def release_all(self) -> int:
        """释放全部会话（应用关闭时调用）"""
        sessions = list(self._sessions.values())
        self._sessions.clear()
        if sessions:
            logger.info("Releasing remaining sessions", count=len(sessions))
            await asyncio.gather(*(s.close() for s in sessions))
        return len(sessions)
