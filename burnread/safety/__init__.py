"""Safety checks for BurnRead.

This module provides:
- Message and TTL validation before secrets are stored
"""

from .validation import MessageValidator, ValidationError, ValidationResult

__all__ = [
    "MessageValidator",
    "ValidationError",
    "ValidationResult",
]
