"""Ports, services and use cases for token issuance and revocation."""
