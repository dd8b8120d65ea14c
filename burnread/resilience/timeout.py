"""Timeout wrappers for backend calls.

Provides timeout protection with:
- Configurable timeouts per call
- Timeout error carrying the limit that was exceeded
"""

import asyncio
import logging
from typing import Any, Awaitable

logger = logging.getLogger(__name__)

# Pre-configured timeouts (seconds)
REDIS_COMMAND_TIMEOUT = 10.0
HEALTH_PROBE_TIMEOUT = 2.0


class OperationTimeoutError(Exception):
    """Raised when an operation times out."""

    def __init__(self, message: str = "", timeout: float = 0.0):
        super().__init__(message)
        self.timeout = timeout


async def with_async_timeout(
    coro: Awaitable[Any],
    timeout_seconds: float,
    error_message: str = "Operation timed out",
) -> Any:
    """Execute a coroutine with timeout.

    Args:
        coro: Coroutine to execute
        timeout_seconds: Timeout in seconds
        error_message: Error message for timeout

    Returns:
        Coroutine result

    Raises:
        OperationTimeoutError: If timeout is exceeded
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.warning(f"{error_message} after {timeout_seconds}s")
        raise OperationTimeoutError(
            f"{error_message} after {timeout_seconds}s",
            timeout_seconds,
        ) from None
