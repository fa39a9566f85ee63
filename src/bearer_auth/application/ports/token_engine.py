from abc import ABC, abstractmethod
from typing import Any, Mapping

from bearer_auth.domain.value_objects.claims import Claims, ParsedToken


class TokenEngine(ABC):
    """Port for signed token operations"""

    @abstractmethod
    def mint(self, ttl_minutes: int, custom_claims: Mapping[str, Any] | None = None) -> str:
        """Mint a signed token expiring after ttl_minutes"""
        pass

    @abstractmethod
    def mint_refresh(self, custom_claims: Mapping[str, Any] | None = None, ttl_minutes: int | None = None) -> str:
        """Mint a refresh token with a default TTL"""
        pass

    @abstractmethod
    def reissue(self, claims: Claims, ttl_minutes: int | None = None) -> str:
        """Mint a new token carrying the given claims, keeping their exp when ttl_minutes is None"""
        pass

    @abstractmethod
    def parse(self, token: str) -> ParsedToken:
        """Verify a token and return it parsed"""
        pass

    @abstractmethod
    def get_claims(self, parsed: ParsedToken) -> Claims:
        """Get a copy of the claims of a parsed token"""
        pass

    @abstractmethod
    def seconds_until_expiry(self, parsed: ParsedToken) -> float:
        """Get the seconds left before the token expires"""
        pass

    @abstractmethod
    def is_expiring_within(self, parsed: ParsedToken, minutes: float) -> bool:
        """Check if the token expires within the given minutes"""
        pass
