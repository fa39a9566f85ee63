"""
Bearer token library for BPT services.

This library provides:
- HS256 signed token minting and verification
- Permission claims carried inside tokens
- A revocation/whitelist store contract with Redis and in-memory adapters
- Password hashing for principal authentication
"""

__version__ = "1.0.0"
__author__ = "BPT Team"
