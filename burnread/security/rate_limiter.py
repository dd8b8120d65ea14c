"""Admission control for incoming requests.

Provides:
- Fixed-window request counter per client identity
- Retry-after hints for rejected clients
- Eviction of idle windows
"""

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RateLimitExceeded(Exception):
    """Raised when a client exceeds its request allowance."""

    def __init__(self, identity: str, retry_after: int = 0):
        super().__init__(f"Rate limit exceeded for {identity}")
        self.identity = identity
        self.retry_after = retry_after


@dataclass
class RateLimitConfig:
    """Configuration for rate limiter."""

    max_requests: int = 100
    window_seconds: float = 3600.0

    def __post_init__(self):
        if self.max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if self.window_seconds <= 0:
            raise ValueError("window_seconds must be positive")


@dataclass
class RateWindow:
    """Request count for one identity in the current window."""

    count: int
    window_start: float


class FixedWindowRateLimiter:
    """Fixed-window rate limiter keyed by client identity.

    Windows are independent per identity, so updates are serialized with a
    lock chosen by identity hash rather than one global lock.

    Usage:
        limiter = FixedWindowRateLimiter(RateLimitConfig(max_requests=3, window_seconds=1))
        if limiter.try_acquire("10.0.0.1"):
            # Serve request
            pass
    """

    LOCK_STRIPES = 64

    def __init__(
        self,
        config: Optional[RateLimitConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize rate limiter.

        Args:
            config: Rate limit configuration
            clock: Time source in seconds
        """
        self.config = config or RateLimitConfig()
        self._clock = clock
        self._windows: dict[str, RateWindow] = {}
        self._locks = [threading.Lock() for _ in range(self.LOCK_STRIPES)]

    def _lock_for(self, identity: str) -> threading.Lock:
        return self._locks[hash(identity) % self.LOCK_STRIPES]

    def _elapsed(self, window: RateWindow, now: float) -> bool:
        return now >= window.window_start + self.config.window_seconds

    def try_acquire(self, identity: str) -> bool:
        """Try to admit one request.

        Args:
            identity: Client identity (e.g., remote address)

        Returns:
            True if the request is allowed
        """
        with self._lock_for(identity):
            now = self._clock()
            window = self._windows.get(identity)

            if window is None or self._elapsed(window, now):
                self._windows[identity] = RateWindow(count=1, window_start=now)
                return True

            if window.count < self.config.max_requests:
                window.count += 1
                return True

        logger.debug(f"Rate limited {identity}")
        return False

    def acquire(self, identity: str) -> None:
        """Admit one request or raise.

        Raises:
            RateLimitExceeded: If the identity is over its allowance
        """
        if not self.try_acquire(identity):
            raise RateLimitExceeded(identity, self.retry_after(identity))

    def retry_after(self, identity: str) -> int:
        """Seconds remaining in the identity's current window.

        Returns:
            Whole seconds (rounded up), 0 if no window exists or it elapsed
        """
        with self._lock_for(identity):
            window = self._windows.get(identity)
            if window is None:
                return 0
            remaining = window.window_start + self.config.window_seconds - self._clock()
        return max(0, math.ceil(remaining))

    def get_status(self, identity: str) -> Optional[dict]:
        """Get window status for an identity.

        Returns:
            Status dict or None
        """
        with self._lock_for(identity):
            window = self._windows.get(identity)
            if window is None:
                return None
            return {
                "identity": identity,
                "count": window.count,
                "window_start": window.window_start,
                "max_requests": self.config.max_requests,
                "window_seconds": self.config.window_seconds,
            }

    def purge_expired(self) -> int:
        """Remove windows that have elapsed.

        Returns:
            Number of windows removed
        """
        removed = 0
        for identity in list(self._windows):
            with self._lock_for(identity):
                window = self._windows.get(identity)
                if window is not None and self._elapsed(window, self._clock()):
                    del self._windows[identity]
                    removed += 1
        if removed:
            logger.debug(f"Purged {removed} idle rate limit windows")
        return removed

    def reset(self, identity: Optional[str] = None) -> None:
        """Forget one identity's window, or all of them."""
        if identity is None:
            self._windows.clear()
            return
        with self._lock_for(identity):
            self._windows.pop(identity, None)

    def __len__(self) -> int:
        return len(self._windows)
