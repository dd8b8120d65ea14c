"""Process health reporting."""

import asyncio
import logging
import sys
import time
from typing import Any, Callable, Optional

from ..storage.base import SecretStorage

logger = logging.getLogger(__name__)

# Unix only; memory is reported as None elsewhere
try:
    import resource

    RESOURCE_AVAILABLE = True
except ImportError:
    RESOURCE_AVAILABLE = False


class HealthCheck:
    """Reports liveness, re-probing dependencies at most once per interval."""

    STATUS_OK = "OK"
    STATUS_ERROR = "ERROR"

    def __init__(
        self,
        storage: Optional[SecretStorage] = None,
        check_interval: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize health check.

        Args:
            storage: Storage backend to probe
            check_interval: Seconds between dependency probes
            clock: Time source in seconds
        """
        self.storage = storage
        self.check_interval = check_interval
        self._clock = clock
        self._started = clock()
        self._last_check: Optional[float] = None
        self._status = self.STATUS_OK
        self._storage_ok = True
        self._lock = asyncio.Lock()

    async def _probe(self) -> None:
        if self.storage is None:
            self._storage_ok = True
        else:
            self._storage_ok = await self.storage.ping()
        self._status = self.STATUS_OK if self._storage_ok else self.STATUS_ERROR
        if not self._storage_ok:
            logger.warning(f"Storage backend {self.storage.name} is unreachable")

    async def check_health(self) -> dict[str, Any]:
        """Get current health status.

        Returns:
            Status dictionary with timestamp, uptime and memory usage
        """
        async with self._lock:
            now = self._clock()
            if self._last_check is None or now - self._last_check >= self.check_interval:
                await self._probe()
                self._last_check = now

            return {
                "status": self._status,
                "timestamp": int(now * 1000),
                "uptime": int((now - self._started) * 1000),
                "storage": {
                    "backend": self.storage.name if self.storage else None,
                    "reachable": self._storage_ok,
                },
                "memory": {"max_rss_mb": _max_rss_mb()},
            }

    @property
    def is_healthy(self) -> bool:
        return self._status == self.STATUS_OK


def _max_rss_mb() -> Optional[float]:
    """Peak resident set size of this process in MiB, None if unavailable."""
    if not RESOURCE_AVAILABLE:
        return None
    rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is bytes on macOS, kilobytes on Linux
    if sys.platform == "darwin":
        return round(rss / (1024 * 1024), 1)
    return round(rss / 1024, 1)
