# Assumptions:
# - Configuration management using environment variables
# - Pydantic Settings for validation
# - The token secret has no default and must be provisioned


from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Library settings supplied by the embedding service"""

    # Environment
    env: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"
    service_name: str = "bearer-auth"

    # Tokens
    token_secret: SecretStr
    token_issuer: str = "bpt-bearer-auth"
    access_token_ttl_minutes: int = Field(default=5, ge=0)
    refresh_token_ttl_minutes: int = Field(default=15, gt=0)
    token_leeway_seconds: int = Field(default=0, ge=0)

    # Revocation store (Redis)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: SecretStr | None = None
    redis_db: int = 0
    redis_socket_timeout: float = 5.0
    revocation_key_prefix: str = "auth:"

    class Config:
        env_prefix = "BEARER_AUTH_"
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get library settings singleton"""
    return Settings()
