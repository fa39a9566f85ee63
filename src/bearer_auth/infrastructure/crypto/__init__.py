from .hs256_token_engine import ClaimsTokenEngine
from .password_hasher import Argon2CredentialHasher

__all__ = [
    "ClaimsTokenEngine",
    "Argon2CredentialHasher",
]
