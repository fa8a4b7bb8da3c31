"""
Session Management
Keeps authenticated sessions in memory, keyed by an opaque bearer token.

Every core call receives the Session explicitly; nothing here is ambient
"current user" state.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from cardtransfer.logging_config import get_logger

logger = get_logger("cardtransfer.auth.session")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    token: str
    login: str
    created_at: datetime
    last_activity: datetime


class SessionManager:
    """
    Notes:
    - Sessions are kept in memory; a restart logs everybody out.
    - A session idle for longer than the timeout is dropped on next access,
      or when any new session is created.
    """

    def __init__(
        self,
        session_timeout_minutes: int = 30,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.sessions: Dict[str, Session] = {}
        self.session_timeout = timedelta(minutes=session_timeout_minutes)
        self._clock = clock

    def create(self, login: str) -> Session:
        now = self._clock()
        self._purge_expired(now)
        session = Session(
            token=secrets.token_urlsafe(32),
            login=login,
            created_at=now,
            last_activity=now,
        )
        self.sessions[session.token] = session
        return session

    def get(self, token: str) -> Optional[Session]:
        """
        Get session, or None if not found/expired.
        """
        session = self.sessions.get(token)
        if session is None:
            return None
        now = self._clock()
        if now - session.last_activity > self.session_timeout:
            del self.sessions[token]
            logger.info("Session expired login=%s", session.login)
            return None
        session.last_activity = now
        return session

    def destroy(self, token: str) -> bool:
        return self.sessions.pop(token, None) is not None

    def _purge_expired(self, now: datetime) -> None:
        for token in [t for t, s in self.sessions.items() if now - s.last_activity > self.session_timeout]:
            self.sessions.pop(token, None)


_SESSION_MANAGER_SINGLETON: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    """
    Build (and cache) the process-wide SessionManager instance.
    """
    global _SESSION_MANAGER_SINGLETON
    if _SESSION_MANAGER_SINGLETON is None:
        from cardtransfer import config

        _SESSION_MANAGER_SINGLETON = SessionManager(session_timeout_minutes=config.SESSION_TIMEOUT_MINUTES)
    return _SESSION_MANAGER_SINGLETON
