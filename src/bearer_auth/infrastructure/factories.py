"""Factory for building library components from settings"""

from bearer_auth.application.ports.credential_hasher import CredentialHasher
from bearer_auth.application.ports.revocation_store import RevocationStore
from bearer_auth.config.settings import Settings
from bearer_auth.infrastructure.crypto.hs256_token_engine import ClaimsTokenEngine
from bearer_auth.infrastructure.crypto.password_hasher import Argon2CredentialHasher
from bearer_auth.logging.setup import setup_logging


class AuthComponentFactory:
    """Factory for creating token, hashing and revocation store components"""

    @staticmethod
    def configure_logging(settings: Settings) -> None:
        """Configure structlog from settings"""
        setup_logging(settings.service_name, level=settings.log_level, format_type=settings.log_format)

    @staticmethod
    def create_token_engine(settings: Settings) -> ClaimsTokenEngine:
        """Create the token engine; the secret is read once here"""
        return ClaimsTokenEngine(
            secret=settings.token_secret.get_secret_value(),
            issuer=settings.token_issuer,
            leeway_seconds=settings.token_leeway_seconds,
        )

    @staticmethod
    def create_credential_hasher() -> CredentialHasher:
        """Create the password hasher"""
        return Argon2CredentialHasher()

    @staticmethod
    def create_revocation_store(settings: Settings) -> RevocationStore:
        """
        Create the revocation store for the environment

        Args:
            settings: Library settings

        Returns:
            RevocationStore: in-memory store under ENV=test, Redis otherwise
        """
        # Tests run without a Redis server
        if settings.env == "test":
            from bearer_auth.infrastructure.memory.revocation_store import InMemoryRevocationStore

            return InMemoryRevocationStore()
        else:
            from bearer_auth.infrastructure.redis.revocation_store import RedisRevocationStore

            password = settings.redis_password.get_secret_value() if settings.redis_password else None
            return RedisRevocationStore.from_connection(
                host=settings.redis_host,
                port=settings.redis_port,
                password=password,
                db=settings.redis_db,
                socket_timeout=settings.redis_socket_timeout,
                key_prefix=settings.revocation_key_prefix,
            )
