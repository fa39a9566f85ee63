import math
from datetime import timedelta

import structlog

from bearer_auth.application.ports.revocation_store import RevocationStore
from bearer_auth.domain.entities.session import Session
from bearer_auth.domain.errors import KeyNotFoundError

logger = structlog.get_logger(__name__)

REVOKED_MARKER = "1"


class SessionRegistry:
    """
    Session whitelist and token blacklist kept in a revocation store.

    The token's own exp stays authoritative: entries here only ever make a
    valid token untrusted, and their TTLs never exceed the token lifetime.
    """

    def __init__(self, store: RevocationStore):
        self.store = store

    def _session_key(self, sid: str) -> str:
        """Get store key for session"""
        return f"session:{sid}"

    def _user_sessions_key(self, subject: str) -> str:
        """Get store key for a subject's session index"""
        return f"user_sessions:{subject}"

    def _revoked_key(self, jti: str) -> str:
        """Get store key for a revoked token"""
        return f"revoked:{jti}"

    async def register_session(self, session: Session, ttl_minutes: int) -> None:
        """Whitelist a session and index it under its subject"""
        key = self._session_key(session.sid)
        user_sessions_key = self._user_sessions_key(session.subject)

        for field, value in session.to_hash().items():
            await self.store.hset(key, field, value)
        await self.store.expire(key, ttl_minutes)

        await self.store.hset(user_sessions_key, session.sid, session.device)
        await self.store.expire(user_sessions_key, ttl_minutes)

        logger.debug("Session registered", sid=session.sid, sub=session.subject, ttl_minutes=ttl_minutes)

    async def get_session(self, sid: str) -> Session | None:
        """Get an active session, None when missing or expired"""
        fields = await self.store.hgetall(self._session_key(sid))
        if not fields or "sub" not in fields:
            return None
        return Session.from_hash(sid, fields)

    async def touch_session(self, session: Session, ttl_minutes: int) -> bool:
        """Slide the TTL of an active session"""
        try:
            await self.store.expire(self._session_key(session.sid), ttl_minutes)
        except KeyNotFoundError:
            return False

        try:
            await self.store.expire(self._user_sessions_key(session.subject), ttl_minutes)
        except KeyNotFoundError:
            await self.store.hset(self._user_sessions_key(session.subject), session.sid, session.device)
            await self.store.expire(self._user_sessions_key(session.subject), ttl_minutes)

        return True

    async def remove_session(self, sid: str) -> bool:
        """Delete a session and drop it from its subject's index"""
        session = await self.get_session(sid)
        if not session:
            return False

        await self.store.delete(self._session_key(sid))
        await self.store.hdel(self._user_sessions_key(session.subject), sid)

        logger.info("Session removed", sid=sid, sub=session.subject)
        return True

    async def remove_all_sessions(self, subject: str) -> int:
        """Delete every session of a subject, return count deleted"""
        user_sessions_key = self._user_sessions_key(subject)
        sids = await self.store.hgetall(user_sessions_key)

        for sid in sids:
            await self.store.delete(self._session_key(sid))
        await self.store.delete(user_sessions_key)

        logger.info("All subject sessions removed", sub=subject, count=len(sids))
        return len(sids)

    async def revoke_token(self, jti: str, remaining_seconds: float) -> bool:
        """Blacklist a token id until the token would have expired anyway"""
        if remaining_seconds <= 0:
            logger.debug("Token already expired, nothing to revoke", jti=jti)
            return False

        ttl = timedelta(seconds=math.ceil(remaining_seconds))
        await self.store.set(self._revoked_key(jti), REVOKED_MARKER, ttl)

        logger.info("Token revoked", jti=jti, ttl_seconds=ttl.total_seconds())
        return True

    async def is_token_revoked(self, jti: str) -> bool:
        """Check the blacklist for a token id"""
        try:
            await self.store.get(self._revoked_key(jti))
        except KeyNotFoundError:
            return False
        return True
