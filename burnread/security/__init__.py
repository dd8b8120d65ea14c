"""Security module for BurnRead.

This module provides:
- AES-256-GCM encryption envelope for stored messages
- Fixed-window rate limiting per client
"""

from .encryption import (
    CryptoEnvelope,
    DecryptionError,
    EncryptionError,
    generate_key,
    load_key,
)
from .rate_limiter import (
    FixedWindowRateLimiter,
    RateLimitConfig,
    RateLimitExceeded,
)

__all__ = [
    "CryptoEnvelope",
    "DecryptionError",
    "EncryptionError",
    "generate_key",
    "load_key",
    "FixedWindowRateLimiter",
    "RateLimitConfig",
    "RateLimitExceeded",
]
