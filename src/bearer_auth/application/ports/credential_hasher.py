from abc import ABC, abstractmethod


class CredentialHasher(ABC):
    """Port for one-way password hashing"""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Hash a password into a self-describing salted hash string"""
        pass

    @abstractmethod
    def verify(self, password: str, hash_string: str) -> bool:
        """Check a password against a stored hash; False on mismatch or malformed hash"""
        pass

    @abstractmethod
    def needs_rehash(self, hash_string: str) -> bool:
        """Check if a stored hash was produced with outdated parameters"""
        pass
