"""Resilience helpers for BurnRead.

This module provides:
- Timeout wrappers for storage backend calls
"""

from .timeout import (
    HEALTH_PROBE_TIMEOUT,
    REDIS_COMMAND_TIMEOUT,
    OperationTimeoutError,
    with_async_timeout,
)

__all__ = [
    "with_async_timeout",
    "OperationTimeoutError",
    "REDIS_COMMAND_TIMEOUT",
    "HEALTH_PROBE_TIMEOUT",
]
