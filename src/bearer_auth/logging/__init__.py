"""Structured logging utilities."""

from .setup import get_logger, redact_sensitive_values, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "redact_sensitive_values",
]
