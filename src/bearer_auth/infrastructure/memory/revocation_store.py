import time
from datetime import timedelta
from typing import Callable

import structlog

from bearer_auth.application.ports.revocation_store import RevocationStore
from bearer_auth.domain.errors import KeyNotFoundError, RevocationStoreError

logger = structlog.get_logger(__name__)


class InMemoryRevocationStore(RevocationStore):
    """
    In-process revocation store following Redis semantics.

    Meant for development and tests: entries live in this process only,
    and expired keys are dropped lazily when touched.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._values: dict[str, str | dict[str, str]] = {}
        self._expires_at: dict[str, float] = {}

    def _purge_if_expired(self, key: str) -> None:
        deadline = self._expires_at.get(key)
        if deadline is not None and deadline <= self._clock():
            self._values.pop(key, None)
            self._expires_at.pop(key, None)

    def _scalar(self, key: str) -> str | None:
        self._purge_if_expired(key)
        value = self._values.get(key)
        if isinstance(value, dict):
            raise RevocationStoreError(
                "Operation against a key holding the wrong kind of value", details={"key": key}
            )
        return value

    def _hash(self, key: str, create: bool = False) -> dict[str, str] | None:
        self._purge_if_expired(key)
        value = self._values.get(key)
        if value is None:
            if not create:
                return None
            value = {}
            self._values[key] = value
        if not isinstance(value, dict):
            raise RevocationStoreError(
                "Operation against a key holding the wrong kind of value", details={"key": key}
            )
        return value

    async def set(self, key: str, value: str, ttl: timedelta | None = None) -> None:
        self._ensure_open()
        self._validate_ttl(ttl)

        self._values[key] = value
        if ttl is None:
            self._expires_at.pop(key, None)
        else:
            self._expires_at[key] = self._clock() + ttl.total_seconds()

        logger.debug("Store value set", key=key, ttl=ttl.total_seconds() if ttl else None)

    async def get(self, key: str) -> str:
        self._ensure_open()

        value = self._scalar(key)
        if value is None:
            raise KeyNotFoundError(details={"key": key})
        return value

    async def hset(self, key: str, field: str, value: str) -> None:
        self._ensure_open()

        self._hash(key, create=True)[field] = value

    async def hget(self, key: str, field: str) -> str:
        self._ensure_open()

        fields = self._hash(key) or {}
        if field not in fields:
            raise KeyNotFoundError(details={"key": key, "field": field})
        return fields[field]

    async def hgetall(self, key: str) -> dict[str, str]:
        self._ensure_open()

        return dict(self._hash(key) or {})

    async def hdel(self, key: str, *fields: str) -> None:
        self._ensure_open()

        values = self._hash(key)
        if not values:
            return
        for field in fields:
            values.pop(field, None)
        # Redis drops a hash once its last field is gone
        if not values:
            await self.delete(key)

    async def expire(self, key: str, minutes: int | float) -> None:
        self._ensure_open()
        self._validate_expire_minutes(minutes)

        self._purge_if_expired(key)
        if key not in self._values:
            raise KeyNotFoundError(details={"key": key})

        if minutes == 0:
            await self.delete(key)
            return
        self._expires_at[key] = self._clock() + minutes * 60

    async def delete(self, key: str) -> None:
        self._ensure_open()

        self._values.pop(key, None)
        self._expires_at.pop(key, None)
