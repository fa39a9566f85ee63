import structlog
from argon2 import PasswordHasher, Type
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from bearer_auth.application.ports.credential_hasher import CredentialHasher
from bearer_auth.domain.errors import HashFailure

logger = structlog.get_logger(__name__)


class Argon2CredentialHasher(CredentialHasher):
    """argon2id password hasher with the library's fixed default work factor"""

    def __init__(self):
        self._hasher = PasswordHasher(type=Type.ID)

    def hash(self, password: str) -> str:
        """
        Hash a password

        Args:
            password: Plain text password

        Returns:
            PHC encoded hash embedding algorithm, cost, salt and digest

        Raises:
            HashFailure: The hash primitive itself failed
        """
        try:
            return self._hasher.hash(password)
        except HashingError as e:
            logger.critical("Password hashing primitive failed", error=str(e))
            raise HashFailure("Password hashing failed") from e

    def verify(self, password: str, hash_string: str) -> bool:
        """Verify a password against its hash"""
        if not isinstance(password, str) or not isinstance(hash_string, str):
            return False

        try:
            return self._hasher.verify(hash_string, password)
        except (VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, hash_string: str) -> bool:
        """Check if the hash was produced with other parameters than the current ones"""
        try:
            return self._hasher.check_needs_rehash(hash_string)
        except (InvalidHashError, ValueError):
            return True
