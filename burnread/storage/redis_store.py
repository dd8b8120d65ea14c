"""Redis-backed secret storage relying on native key expiry."""

import logging
import time
from typing import Any, Callable, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..models import StoredSecret
from ..resilience.timeout import (
    HEALTH_PROBE_TIMEOUT,
    REDIS_COMMAND_TIMEOUT,
    OperationTimeoutError,
    with_async_timeout,
)
from .base import SecretStorage, StorageError

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class RedisStorage(SecretStorage):
    """Stores each secret as JSON under a key that expires with the secret.

    ``save`` writes with ``PSETEX`` only when the remaining TTL is positive;
    a secret already past its expiration is never written. ``sweep_expired``
    does nothing because Redis expires keys itself.
    """

    name = "redis"

    def __init__(
        self,
        redis_client: Any,
        key_prefix: str = "burnread:",
        command_timeout: float = REDIS_COMMAND_TIMEOUT,
        clock: Callable[[], int] = _now_ms,
    ):
        """Initialize Redis storage.

        Args:
            redis_client: redis.asyncio client (or compatible)
            key_prefix: Prefix applied to every key
            command_timeout: Per-command timeout in seconds
            clock: Time source in epoch milliseconds
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.command_timeout = command_timeout
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Any) -> "RedisStorage":
        """Create storage and client from application settings."""
        client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password,
            db=settings.redis_db,
            socket_timeout=settings.redis_command_timeout,
            socket_connect_timeout=settings.redis_command_timeout,
            decode_responses=True,
        )
        logger.info(
            f"Using Redis storage at {settings.redis_host}:{settings.redis_port}"
            f"/{settings.redis_db}"
        )
        return cls(
            client,
            key_prefix=settings.redis_key_prefix,
            command_timeout=settings.redis_command_timeout,
        )

    def _key(self, secret_id: str) -> str:
        return f"{self.key_prefix}{secret_id}"

    async def _execute(self, operation: str, coro: Any) -> Any:
        """Run a Redis command under the command timeout.

        Raises:
            StorageError: On timeout or Redis failure
        """
        try:
            return await with_async_timeout(
                coro, self.command_timeout, f"Redis {operation} timed out"
            )
        except OperationTimeoutError as e:
            raise StorageError(str(e)) from e
        except (RedisError, OSError) as e:
            raise StorageError(f"Redis {operation} failed: {e}") from e

    async def save(self, secret_id: str, secret: StoredSecret) -> None:
        ttl_ms = secret.expiration_time - self._clock()
        if ttl_ms <= 0:
            logger.debug(f"Secret {secret_id} already expired, not written")
            return
        await self._execute(
            "PSETEX", self.redis.psetex(self._key(secret_id), ttl_ms, secret.to_json())
        )

    async def get(self, secret_id: str) -> Optional[StoredSecret]:
        raw = await self._execute("GET", self.redis.get(self._key(secret_id)))
        if raw is None:
            return None
        try:
            return StoredSecret.from_json(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt value for secret {secret_id}: {e}") from e

    async def delete(self, secret_id: str) -> None:
        await self._execute("DEL", self.redis.delete(self._key(secret_id)))

    async def sweep_expired(self, now_ms: int) -> int:
        return 0

    async def ping(self) -> bool:
        try:
            return bool(
                await with_async_timeout(
                    self.redis.ping(), HEALTH_PROBE_TIMEOUT, "Redis PING timed out"
                )
            )
        except (OperationTimeoutError, RedisError, OSError) as e:
            logger.warning(f"Redis health probe failed: {e}")
            return False

    async def close(self) -> None:
        try:
            await self.redis.aclose()
        except (RedisError, OSError) as e:
            logger.warning(f"Error closing Redis client: {e}")
