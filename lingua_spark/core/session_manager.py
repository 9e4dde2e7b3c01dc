"""In-process registry for study sessions with an idle sweep.

Sessions carry a ``last_activity`` timestamp that is bumped on every lookup.
A background task started from the app lifespan drops sessions that have been
idle longer than ``idle_seconds``.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Generic, Optional, Protocol, TypeVar

from lingua_spark.core.logging import get_logger

logger = get_logger(__name__)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class TrackedSession(Protocol):
    id: str
    last_activity: datetime


S = TypeVar("S", bound=TrackedSession)


class SessionManager(Generic[S]):
    def __init__(self) -> None:
        self.sessions: dict[str, S] = {}
        self._cleanup_task: Optional[asyncio.Task] = None
        self._idle_seconds: int = 600
        self._sweep_interval: int = 60

    def add(self, session: S) -> S:
        session.last_activity = now_utc()
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> Optional[S]:
        session = self.sessions.get(session_id)
        if session is not None:
            session.last_activity = now_utc()
        return session

    def end_session(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None

    def sweep(self, now: Optional[datetime] = None) -> list[str]:
        """Drop sessions idle for longer than ``idle_seconds``."""
        now = now or now_utc()
        expired = [
            sid
            for sid, s in list(self.sessions.items())
            if (now - s.last_activity).total_seconds() > self._idle_seconds
        ]
        for sid in expired:
            self.sessions.pop(sid, None)
        if expired:
            logger.info(f"Dropped {len(expired)} idle {type(self).__name__} sessions")
        return expired

    # Cleanup loop -------------------------------------------------------
    def start(self, *, idle_seconds: int = 600, sweep_interval: int = 60) -> None:
        self._idle_seconds = max(60, int(idle_seconds))
        self._sweep_interval = max(5, int(sweep_interval))
        if self._cleanup_task and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop(self) -> None:
        task, self._cleanup_task = self._cleanup_task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _cleanup_loop(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._sweep_interval)
                self.sweep()
        except asyncio.CancelledError:
            return
