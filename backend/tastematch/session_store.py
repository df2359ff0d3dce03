from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Callable

from flask import Flask, current_app

from tastematch.models import ComparisonSession, TasteProfile

logger = logging.getLogger(__name__)

# Key under which we store the session store on Flask's extensions
_SESSION_STORE_KEY = "comparison_sessions"

DEFAULT_TTL_SECONDS = 30 * 60

Clock = Callable[[], float]


class SessionConflictError(RuntimeError):
    """Raised when a session cannot accept the requested participant."""


class SessionStore:
    """
    In-memory comparison sessions with a fixed time-to-live.

    Expired sessions are dropped lazily on ``get`` and swept on ``create``.
    ``clock`` returns seconds and is injectable for tests.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Clock = time.time) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, ComparisonSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    # ---------- primitive operations ----------

    def put(self, session: ComparisonSession) -> None:
        with self._lock:
            self._sessions[session.session_id] = session

    def _live(self, session_id: str) -> ComparisonSession | None:
        # Caller holds the lock
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if session.is_expired(self._clock()):
            logger.info("Comparison session %s expired", session_id)
            del self._sessions[session_id]
            return None
        return session

    def get(self, session_id: str) -> ComparisonSession | None:
        with self._lock:
            return self._live(session_id)

    def expire(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [sid for sid, session in self._sessions.items() if session.is_expired(now)]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.debug("Purged %d expired comparison sessions", len(expired))
        return len(expired)

    # ---------- session lifecycle ----------

    def create(
        self,
        user1_profile: TasteProfile,
        user1_token: str | None = None,
        time_range: str = "medium_term",
    ) -> ComparisonSession:
        now = self._clock()
        session = ComparisonSession(
            session_id=uuid.uuid4().hex,
            user1_profile=user1_profile,
            user1_token=user1_token,
            created_at=now,
            expires_at=now + self.ttl_seconds,
            time_range=time_range,
        )
        self.put(session)
        self.purge_expired()
        logger.info("Created comparison session %s for %s", session.session_id, user1_profile.user.id)
        return session

    def add_user2(
        self,
        session_id: str,
        user2_profile: TasteProfile,
        user2_token: str | None = None,
        time_range: str | None = None,
    ) -> ComparisonSession | None:
        """
        Seat the second listener. Raises SessionConflictError when the seat
        was taken while this caller's profile was being fetched.
        """
        with self._lock:
            session = self._live(session_id)
            if session is None:
                return None
            if session.has_user2:
                raise SessionConflictError("This comparison already has two listeners")
            session.user2_profile = user2_profile
            session.user2_token = user2_token
            if time_range:
                session.time_range = time_range
            return session

    def update_profiles(
        self,
        session_id: str,
        user1_profile: TasteProfile,
        user2_profile: TasteProfile,
        time_range: str | None = None,
    ) -> ComparisonSession | None:
        with self._lock:
            session = self._live(session_id)
            if session is None:
                return None
            session.user1_profile = user1_profile
            session.user2_profile = user2_profile
            if time_range:
                session.time_range = time_range
            return session

    def update_token(self, session_id: str, user_id: str, access_token: str) -> ComparisonSession | None:
        """Swap in a participant's fresh token after they log in again."""
        with self._lock:
            session = self._live(session_id)
            if session is None:
                return None
            if session.user1_profile.user.id == user_id:
                session.user1_token = access_token
            elif session.user2_profile is not None and session.user2_profile.user.id == user_id:
                session.user2_token = access_token
            return session


def init_session_store(app: Flask, clock: Clock | None = None) -> SessionStore:
    store = SessionStore(
        ttl_seconds=int(app.config.get("SESSION_TTL_SECONDS", DEFAULT_TTL_SECONDS)),
        clock=clock or time.time,
    )
    app.extensions[_SESSION_STORE_KEY] = store
    app.logger.info("Session store ready (ttl=%ss)", store.ttl_seconds)
    return store


def get_session_store(app: Flask | None = None) -> SessionStore:
    flask_app = app or current_app
    store = flask_app.extensions.get(_SESSION_STORE_KEY)
    if store is None:
        raise RuntimeError("Session store not initialised; call init_session_store(app)")
    return store
