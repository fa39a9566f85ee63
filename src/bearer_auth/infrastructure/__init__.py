"""Adapters: HS256 engine, argon2 hasher and revocation stores."""
