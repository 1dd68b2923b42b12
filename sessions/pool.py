"""
sessions/pool.py -- In-memory session tokens with TTL expiry.

Sessions expire a fixed TTL after creation (not sliding: check() does not
refresh them). Expiry is lazy: an expired session is evicted only when
check() finds it, or when the caller runs purge_expired(). There is no timer
and no background sweep, so a caller that never re-checks old tokens should
call purge_expired() periodically to bound memory.

No internal locking. Callers sharing a pool across threads must serialise
access themselves.

Usage:
    pool = SessionPool.new(timedelta(minutes=30))
    token = pool.generate()
    pool.check(token)       # True until 30 minutes after generate()
    pool.remove(token)      # immediate logout
    pool.purge_expired()    # optional sweep, returns number evicted
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from collections.abc import Callable
from datetime import timedelta

from core.config import Settings, get_settings
from core.errors import InvalidInput
from sessions.models import Session

logger = logging.getLogger("credfile.sessions")

TOKEN_LENGTH = 48
_ALPHABET = string.ascii_letters + string.digits


class SessionPool:
    def __init__(self, ttl: timedelta | float, clock: Callable[[], float] = time.monotonic) -> None:
        seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        if seconds <= 0:
            raise InvalidInput("Session TTL must be positive.")
        self._ttl = seconds
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    @classmethod
    def new(cls, ttl: timedelta | float) -> "SessionPool":
        return cls(ttl)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SessionPool":
        """Build a pool whose TTL is CREDFILE_SESSION_TTL_SECONDS."""
        settings = settings or get_settings()
        return cls(settings.session_ttl_seconds)

    @property
    def ttl(self) -> float:
        """Session lifetime in seconds."""
        return self._ttl

    def generate(self) -> str:
        """Issue a new 48-character alphanumeric token and record it."""
        token = "".join(secrets.choice(_ALPHABET) for _ in range(TOKEN_LENGTH))
        self._sessions[token] = Session(token=token, created_at=self._clock())
        logger.debug("Issued session (%d active)", len(self._sessions))
        return token

    def check(self, token: str) -> bool:
        """Return True if token is live. Evicts it and returns False if expired."""
        session = self._sessions.get(token)
        if session is None:
            return False
        if session.age(self._clock()) > self._ttl:
            self._delete(token)
            logger.debug("Evicted expired session")
            return False
        return True

    def remove(self, token: str) -> None:
        """Invalidate token. No-op if it is not in the pool."""
        self._delete(token)

    def purge_expired(self) -> int:
        """Evict every expired session. Returns the number removed."""
        now = self._clock()
        expired = [token for token, session in self._sessions.items() if session.age(now) > self._ttl]
        for token in expired:
            self._delete(token)
        if expired:
            logger.debug("Purged %d expired session(s)", len(expired))
        return len(expired)

    def _delete(self, token: str) -> None:
        self._sessions.pop(token, None)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, token: str) -> bool:
        # Membership only; does not evict.
        return token in self._sessions
