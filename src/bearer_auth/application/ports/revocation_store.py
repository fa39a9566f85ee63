from abc import ABC, abstractmethod
from datetime import timedelta

import structlog

from bearer_auth.domain.errors import InvalidTTLError, StoreClosedError

logger = structlog.get_logger(__name__)


class RevocationStore(ABC):
    """
    Port for the TTL-capable key/value store tracking active and revoked tokens.

    Every operation may raise StoreUnavailableError. Implementations never
    retry or cache; timeouts come from the caller's asyncio task.
    """

    _closed: bool = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError()

    @staticmethod
    def _validate_ttl(ttl: timedelta | None) -> None:
        if ttl is not None and ttl.total_seconds() <= 0:
            raise InvalidTTLError("Store TTL must be positive", details={"ttl_seconds": ttl.total_seconds()})

    @staticmethod
    def _validate_expire_minutes(minutes: int | float) -> None:
        if isinstance(minutes, bool) or not isinstance(minutes, (int, float)) or minutes < 0:
            raise InvalidTTLError("Expire minutes must be a non-negative number", details={"minutes": repr(minutes)})

    async def close(self) -> None:
        """Release the backend; no operation may be issued afterwards"""
        if self._closed:
            logger.warning("Revocation store already closed", store=type(self).__name__)
            return
        self._closed = True
        await self._close_backend()

    async def _close_backend(self) -> None:
        """Hook for implementations owning a connection"""
        pass

    async def __aenter__(self) -> "RevocationStore":
        self._ensure_open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def set(self, key: str, value: str, ttl: timedelta | None = None) -> None:
        """Set a scalar value; ttl None means no expiry"""
        pass

    @abstractmethod
    async def get(self, key: str) -> str:
        """Get a scalar value, KeyNotFoundError when absent or expired"""
        pass

    @abstractmethod
    async def hset(self, key: str, field: str, value: str) -> None:
        """Set one field of a hash"""
        pass

    @abstractmethod
    async def hget(self, key: str, field: str) -> str:
        """Get one field of a hash, KeyNotFoundError when key or field is absent"""
        pass

    @abstractmethod
    async def hgetall(self, key: str) -> dict[str, str]:
        """Get every field of a hash, empty when the key is absent"""
        pass

    @abstractmethod
    async def hdel(self, key: str, *fields: str) -> None:
        """Delete fields of a hash"""
        pass

    @abstractmethod
    async def expire(self, key: str, minutes: int | float) -> None:
        """Set or refresh the TTL of an existing key, KeyNotFoundError when absent"""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a key; deleting an absent key is not an error"""
        pass
