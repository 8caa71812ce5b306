"""Simple MCP session lifecycle tracking."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from ._logging import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class McpSession(BaseModel):
    """A connected MCP client session."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    created_at: datetime = Field(default_factory=_utcnow)
    last_activity: datetime = Field(default_factory=_utcnow)


class McpSessionManager:
    """In-memory session store keyed by session id."""

    def __init__(self) -> None:
        self._sessions: Dict[str, McpSession] = {}

    def create(self) -> McpSession:
        now = _utcnow()
        session = McpSession(created_at=now, last_activity=now)
        self._sessions[session.id] = session
        logger.info("Session connected", session_id=session.id)
        return session

    def get(self, session_id: str) -> Optional[McpSession]:
        return self._sessions.get(session_id)

    def touch(self, session_id: str) -> None:
        """Update last activity timestamp."""
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_activity = _utcnow()

    def disconnect(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("Session disconnected", session_id=session_id)
        return removed

    def has(self, session_id: str) -> bool:
        return session_id in self._sessions

    def prune_idle(self, max_idle_seconds: float, now: Optional[datetime] = None) -> int:
        """Drop sessions idle for longer than ``max_idle_seconds``; returns how many were dropped."""
        cutoff = (now or _utcnow()) - timedelta(seconds=max_idle_seconds)
        stale = [sid for sid, session in self._sessions.items() if session.last_activity < cutoff]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info("Pruned idle sessions", count=len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)
