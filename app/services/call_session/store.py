"""In-memory call session store."""
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Callable, Dict, Optional

from app.services.call_session.models import CallSession

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    Owns every CallSession in the process.

    Sessions are created lazily on first use. Turns for the same call are
    serialized through a per-call lock; ended calls stay readable until their
    expiry passes and are purged lazily on the next store access.
    """

    def __init__(self, grace_seconds: float = 60.0, clock: Optional[Clock] = None):
        self.grace = timedelta(seconds=grace_seconds)
        self.clock: Clock = clock or utc_now
        self._sessions: Dict[str, CallSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._expires_at: Dict[str, datetime] = {}

    def now(self) -> datetime:
        return self.clock()

    def resolve(self, call_id: str) -> CallSession:
        """Return the session for call_id, creating it if needed."""
        self.purge_expired()
        session = self._sessions.get(call_id)
        if session is None:
            session = CallSession(call_id=call_id, created_at=self.now())
            self._sessions[call_id] = session
            logger.info(f"[SESSION] New call {call_id} connected")
            logger.info(f"[SESSION] Active calls: {len(self._sessions)}")
        return session

    def get(self, call_id: str) -> Optional[CallSession]:
        """Return the session for call_id without creating one."""
        self.purge_expired()
        return self._sessions.get(call_id)

    @asynccontextmanager
    async def mutate(self, call_id: str, create: bool = True) -> AsyncIterator[Optional[CallSession]]:
        """
        Hold the call's lock while working on its session.

        asyncio.Lock wakes waiters in FIFO order, so queued turns run in the
        order they arrived. With create=False the session is looked up after
        the lock is taken and None is yielded if it was purged meanwhile.
        """
        lock = self._locks.setdefault(call_id, asyncio.Lock())
        async with lock:
            yield self.resolve(call_id) if create else self.get(call_id)

    def schedule_removal(self, call_id: str) -> None:
        """Keep an ended call addressable for the grace window, then drop it."""
        if call_id not in self._sessions:
            return
        expires_at = self.now() + self.grace
        self._expires_at[call_id] = expires_at
        logger.debug(f"[SESSION] {call_id} scheduled for removal at {expires_at.isoformat()}")

    def remove(self, call_id: str) -> None:
        self._sessions.pop(call_id, None)
        self._expires_at.pop(call_id, None)
        lock = self._locks.get(call_id)
        # A queued turn still needs the same lock object to be released into.
        if lock is not None and not lock.locked():
            del self._locks[call_id]

    def purge_expired(self) -> int:
        """Drop sessions whose grace window has passed."""
        now = self.now()
        expired = [call_id for call_id, at in self._expires_at.items() if at <= now]
        for call_id in expired:
            self.remove(call_id)
            logger.info(f"[SESSION] Removed {call_id} from memory")
        return len(expired)

    def active_count(self) -> int:
        self.purge_expired()
        return len(self._sessions)

    def __len__(self) -> int:
        return self.active_count()

    def __contains__(self, call_id: object) -> bool:
        self.purge_expired()
        return call_id in self._sessions
