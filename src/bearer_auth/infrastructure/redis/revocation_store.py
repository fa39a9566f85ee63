import math
from contextlib import contextmanager
from datetime import timedelta

import redis.asyncio as redis
import structlog
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from bearer_auth.application.ports.revocation_store import RevocationStore
from bearer_auth.domain.errors import KeyNotFoundError, RevocationStoreError, StoreUnavailableError

logger = structlog.get_logger(__name__)


def _milliseconds(seconds: float) -> int:
    """Convert seconds to whole milliseconds, rounding up so short TTLs stay positive"""
    # Drop float noise before rounding up
    return math.ceil(round(seconds * 1000, 6))


class RedisRevocationStore(RevocationStore):
    """Redis implementation of the revocation store port"""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    @classmethod
    def from_connection(
        cls,
        host: str,
        port: int,
        password: str | None = None,
        db: int = 0,
        socket_timeout: float = 5.0,
        key_prefix: str = "",
    ) -> "RedisRevocationStore":
        """Open a client for host:port; the client pools connections lazily"""
        client = redis.Redis(
            host=host,
            port=int(port),
            password=password,
            db=db,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        logger.info("Redis revocation store created", host=host, port=port, db=db)
        return cls(client, key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        """Get Redis key for a store key"""
        return f"{self.key_prefix}{key}"

    @contextmanager
    def _translate_errors(self, operation: str, key: str):
        try:
            yield
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.error("Revocation store unavailable", operation=operation, key=key, error=str(e))
            raise StoreUnavailableError(details={"operation": operation, "key": key}) from e
        except RedisError as e:
            logger.error("Revocation store operation failed", operation=operation, key=key, error=str(e))
            raise RevocationStoreError(f"{operation} failed: {e}", details={"operation": operation, "key": key}) from e

    async def ping(self) -> bool:
        """Check connectivity"""
        self._ensure_open()
        with self._translate_errors("ping", ""):
            return bool(await self.redis.ping())

    async def _close_backend(self) -> None:
        with self._translate_errors("close", ""):
            await self.redis.aclose()
        logger.info("Redis revocation store closed")

    async def set(self, key: str, value: str, ttl: timedelta | None = None) -> None:
        """Set a scalar value in Redis"""
        self._ensure_open()
        self._validate_ttl(ttl)

        with self._translate_errors("set", key):
            await self.redis.set(self._key(key), value, px=_milliseconds(ttl.total_seconds()) if ttl is not None else None)

        logger.debug("Store value set", key=key, ttl=ttl.total_seconds() if ttl is not None else None)

    async def get(self, key: str) -> str:
        """Get a scalar value from Redis"""
        self._ensure_open()

        with self._translate_errors("get", key):
            value = await self.redis.get(self._key(key))

        if value is None:
            raise KeyNotFoundError(details={"key": key})
        return value

    async def hset(self, key: str, field: str, value: str) -> None:
        """Set a hash field in Redis"""
        self._ensure_open()

        with self._translate_errors("hset", key):
            await self.redis.hset(self._key(key), field, value)

        logger.debug("Store hash field set", key=key, field=field)

    async def hget(self, key: str, field: str) -> str:
        """Get a hash field from Redis"""
        self._ensure_open()

        with self._translate_errors("hget", key):
            value = await self.redis.hget(self._key(key), field)

        if value is None:
            raise KeyNotFoundError(details={"key": key, "field": field})
        return value

    async def hgetall(self, key: str) -> dict[str, str]:
        """Get all hash fields from Redis"""
        self._ensure_open()

        with self._translate_errors("hgetall", key):
            values = await self.redis.hgetall(self._key(key))

        return dict(values or {})

    async def hdel(self, key: str, *fields: str) -> None:
        """Delete hash fields from Redis"""
        self._ensure_open()
        if not fields:
            return

        with self._translate_errors("hdel", key):
            await self.redis.hdel(self._key(key), *fields)

        logger.debug("Store hash fields deleted", key=key, fields=list(fields))

    async def expire(self, key: str, minutes: int | float) -> None:
        """Set a TTL on an existing Redis key"""
        self._ensure_open()
        self._validate_expire_minutes(minutes)

        with self._translate_errors("expire", key):
            applied = await self.redis.pexpire(self._key(key), _milliseconds(minutes * 60))

        if not applied:
            raise KeyNotFoundError(details={"key": key})

        logger.debug("Store key expiry set", key=key, minutes=minutes)

    async def delete(self, key: str) -> None:
        """Delete a key from Redis"""
        self._ensure_open()

        with self._translate_errors("delete", key):
            deleted = await self.redis.delete(self._key(key))

        logger.debug("Store key deleted", key=key, deleted=bool(deleted))
