import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from fitplan.config import SESSION_TTL_HOURS
from fitplan.crud.outcome import Outcome
from fitplan.crud.records import AccountRecord, SessionData
from fitplan.utils.utils import new_session_token, utcnow

logger = logging.getLogger(__name__)

"""
Session Manager
---------------
Two states per client: anonymous (no usable token) and authenticated
(token maps to a live session row).
1. open_session: anonymous -> authenticated, new token, expiry = now + TTL.
2. resolve: token -> session, or None when absent, unknown or expired.
3. close_session: authenticated -> anonymous.
"""

DEFAULT_SESSION_TTL = timedelta(hours=SESSION_TTL_HOURS)


class SessionManager:
    def __init__(self, store, ttl: timedelta = DEFAULT_SESSION_TTL, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.ttl = ttl
        self.clock = clock

    def open_session(self, account: AccountRecord) -> Outcome[SessionData]:
        now = self.clock()
        data = SessionData(
            token=new_session_token(),
            account_id=account.id,
            username=account.username,
            created_at=now,
            expires_at=now + self.ttl,
        )
        outcome = self.store.create(data)
        if outcome.ok:
            logger.info(f"Session opened for '{account.username}', expires {data.expires_at.isoformat()}")
        return outcome

    def resolve(self, token: Optional[str]) -> Outcome[Optional[SessionData]]:
        if not token:
            return Outcome.success(None)

        found = self.store.get(token)
        if not found.ok or found.value is None:
            return found

        session = found.value
        if session.expires_at <= self.clock():
            logger.info(f"Session for '{session.username}' expired")
            self.store.delete(token)
            return Outcome.success(None)
        return found

    def close_session(self, token: str) -> Outcome[bool]:
        outcome = self.store.delete(token)
        if outcome.ok:
            logger.info("Session closed")
        return outcome

    def purge_expired(self) -> Outcome[int]:
        outcome = self.store.purge_expired(self.clock())
        if outcome.ok and outcome.value:
            logger.info(f"Purged {outcome.value} expired sessions")
        return outcome
