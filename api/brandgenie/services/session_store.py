"""In-memory registry of wizard sessions."""

from __future__ import annotations

import time
from typing import Callable, Dict, Optional

from ..core.config import settings
from ..core.structured_logging import LoggerFactory
from ..models.exceptions import SessionNotFoundException
from .wizard import WizardSession

logger = LoggerFactory.get_logger(__name__)


class SessionStore:
    """Owns every live WizardSession.

    Sessions expire after ``ttl_seconds`` without access. When the store is
    full the least recently used session is evicted. Expired, evicted and
    deleted sessions have their in-flight generation tasks cancelled.
    """

    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds
        self.max_sessions = max_sessions if max_sessions is not None else settings.max_sessions
        self._clock = clock
        self._sessions: Dict[str, WizardSession] = {}
        self._last_access: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self) -> WizardSession:
        self.purge_expired()
        if len(self._sessions) >= self.max_sessions:
            oldest = min(self._last_access, key=self._last_access.get)
            logger.warning("Session store full, evicting least recently used session", session_id=oldest)
            self._discard(oldest)

        session = WizardSession()
        self._sessions[session.session_id] = session
        self._last_access[session.session_id] = self._clock()
        logger.info("Wizard session created", session_id=session.session_id)
        return session

    def get(self, session_id: str) -> WizardSession:
        self.purge_expired()
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundException(session_id)
        self._last_access[session_id] = self._clock()
        return session

    def delete(self, session_id: str) -> None:
        if session_id not in self._sessions:
            raise SessionNotFoundException(session_id)
        self._discard(session_id)
        logger.info("Wizard session deleted", session_id=session_id)

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [sid for sid, seen in self._last_access.items() if now - seen > self.ttl_seconds]
        for sid in expired:
            self._discard(sid)
        if expired:
            logger.info("Expired wizard sessions purged", count=len(expired))
        return len(expired)

    def close(self) -> None:
        """Cancel every session's work and forget all sessions."""
        for sid in list(self._sessions):
            self._discard(sid)

    def _discard(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        self._last_access.pop(session_id, None)
        if session is not None:
            session.cancel_all()
