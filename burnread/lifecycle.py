"""Secret lifecycle engine.

Provides:
- Create: TTL clamping, id assignment, persistence with absolute expiration
- Read-and-destroy: at most one successful read per secret, never after expiry
- Periodic cleanup of expired entries for backends without native expiry
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from .models import EncryptedPayload, StoredSecret
from .storage.base import SecretStorage

logger = logging.getLogger(__name__)


class ReadOutcome(str, Enum):
    """Result of a read-and-destroy attempt."""

    READ = "READ"
    NOT_FOUND = "NOT_FOUND"  # Never existed, already consumed, or swept
    EXPIRED = "EXPIRED"  # Observed past its expiration and deleted


@dataclass(frozen=True)
class ReadResult:
    """Outcome of a read-and-destroy attempt."""

    outcome: ReadOutcome
    secret: Optional[StoredSecret] = None


def current_time_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class SecretLifecycle:
    """Orchestrates create, read-and-destroy and cleanup for stored secrets.

    All three operations hold one ``asyncio.Lock`` across their store calls,
    so a read can never interleave with another read, a save, or a sweep.

    Usage:
        lifecycle = SecretLifecycle(InMemoryStorage(), default_ttl=60_000, max_ttl=3_600_000)
        secret_id = await lifecycle.create(envelope.encrypt("hello"), ttl_ms=30_000)
        secret = await lifecycle.read_and_destroy(secret_id)
    """

    def __init__(
        self,
        storage: SecretStorage,
        default_ttl: int,
        max_ttl: int,
        clock: Callable[[], int] = current_time_ms,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        """Initialize lifecycle engine.

        Args:
            storage: Time-bounded store
            default_ttl: TTL in ms used when none is requested
            max_ttl: Upper bound in ms applied to requested TTLs
            clock: Time source in epoch milliseconds
            id_factory: Generator for new secret ids
        """
        if not 0 < default_ttl <= max_ttl:
            raise ValueError("Require 0 < default_ttl <= max_ttl")
        self.storage = storage
        self.default_ttl = default_ttl
        self.max_ttl = max_ttl
        self._clock = clock
        self._id_factory = id_factory
        self._lock = asyncio.Lock()

    def effective_ttl(self, ttl_ms: Optional[int]) -> int:
        """Resolve the TTL actually applied to a new secret.

        None selects the default, values above ``max_ttl`` are capped.

        Raises:
            ValueError: If ``ttl_ms`` is not positive
        """
        if ttl_ms is None:
            return self.default_ttl
        if ttl_ms <= 0:
            raise ValueError(f"TTL must be positive, got {ttl_ms}")
        return min(ttl_ms, self.max_ttl)

    async def create(self, content: EncryptedPayload, ttl_ms: Optional[int] = None) -> str:
        """Store an encrypted payload.

        Args:
            content: Encrypted payload
            ttl_ms: Requested time-to-live in milliseconds

        Returns:
            New secret id
        """
        ttl = self.effective_ttl(ttl_ms)
        async with self._lock:
            secret_id = self._id_factory()
            secret = StoredSecret(content=content, expiration_time=self._clock() + ttl)
            await self.storage.save(secret_id, secret)

        logger.debug(f"Created secret {secret_id} (ttl={ttl}ms)")
        return secret_id

    async def consume(self, secret_id: str) -> ReadResult:
        """Fetch a secret and delete it, reporting why a read failed.

        The secret is deleted on every path that observed it, expired or not.
        """
        async with self._lock:
            secret = await self.storage.get(secret_id)
            if secret is None:
                return ReadResult(ReadOutcome.NOT_FOUND)

            await self.storage.delete(secret_id)

            if secret.is_expired(self._clock()):
                logger.debug(f"Secret {secret_id} expired before read")
                return ReadResult(ReadOutcome.EXPIRED)

        return ReadResult(ReadOutcome.READ, secret)

    async def read_and_destroy(self, secret_id: str) -> Optional[StoredSecret]:
        """Fetch a secret and delete it.

        Returns:
            The stored secret, or None if it is absent, consumed or expired
        """
        return (await self.consume(secret_id)).secret

    async def cleanup(self, now_ms: Optional[int] = None) -> int:
        """Sweep expired secrets from the store.

        Returns:
            Number of secrets removed
        """
        async with self._lock:
            removed = await self.storage.sweep_expired(
                self._clock() if now_ms is None else now_ms
            )
        if removed:
            logger.info(f"Cleanup removed {removed} expired secrets")
        return removed


class CleanupScheduler:
    """Runs a cleanup coroutine on a fixed interval in a background task.

    A failing tick is logged and the next tick still runs.
    """

    def __init__(self, cleanup: Callable[[], Awaitable[Any]], interval_ms: int):
        """Initialize scheduler.

        Args:
            cleanup: Coroutine function invoked every tick
            interval_ms: Interval between ticks in milliseconds
        """
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.cleanup = cleanup
        self.interval = interval_ms / 1000.0
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0
        self.failures = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background task (no-op if already running)."""
        if self.is_running:
            logger.warning("Cleanup scheduler already running")
            return
        self._task = asyncio.create_task(self._run(), name="burnread-cleanup")
        logger.info(f"Cleanup scheduler started (interval={self.interval}s)")

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Cleanup scheduler stopped")

    async def tick(self) -> None:
        """Run one cleanup pass, logging and swallowing failures."""
        self.ticks += 1
        try:
            await self.cleanup()
        except Exception:
            self.failures += 1
            logger.exception("Error during cleanup")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.tick()
