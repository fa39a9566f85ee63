# Assumptions:
# - Using pytest with pytest-asyncio for coroutine tests
# - Clocks are injected so expiry can be tested without sleeping
# - No Redis server is available; the in-memory store stands in for it

import pytest

from bearer_auth.application.services.session_registry import SessionRegistry
from bearer_auth.infrastructure.crypto.hs256_token_engine import ClaimsTokenEngine
from bearer_auth.infrastructure.crypto.password_hasher import Argon2CredentialHasher
from bearer_auth.infrastructure.memory.revocation_store import InMemoryRevocationStore

SECRET = "test-secret-key-for-testing-only-do-not-use-in-production"
OTHER_SECRET = "another-secret-key-for-testing-only-do-not-use-in-prod"


class FakeClock:
    """Manually advanced clock returning epoch seconds"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def secret():
    """HMAC secret used by the engine fixtures"""
    return SECRET


@pytest.fixture
def other_secret():
    """A second secret for cross-signing checks"""
    return OTHER_SECRET


@pytest.fixture
def clock():
    """Controllable clock shared by the engine and the store"""
    return FakeClock()


@pytest.fixture
def engine():
    """Token engine on the real clock"""
    return ClaimsTokenEngine(secret=SECRET)


@pytest.fixture
def clocked_engine(clock):
    """Token engine on the fake clock"""
    return ClaimsTokenEngine(secret=SECRET, clock=clock)


@pytest.fixture
def store(clock):
    """In-memory revocation store on the fake clock"""
    return InMemoryRevocationStore(clock=clock)


@pytest.fixture
def session_registry(store):
    """Session registry backed by the in-memory store"""
    return SessionRegistry(store)


@pytest.fixture(scope="session")
def hasher():
    """argon2 credential hasher"""
    return Argon2CredentialHasher()
