"""Storage interface for stored secrets."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import StoredSecret


class StorageError(Exception):
    """Raised when the storage backend fails (unreachable, timeout, corrupt value)."""

    pass


class SecretStorage(ABC):
    """Key/value store with per-entry expiration.

    ``get``, ``save`` and ``delete`` never filter by expiration; callers
    compare ``StoredSecret.expiration_time`` themselves. ``sweep_expired``
    is always safe to call but only does work for backends without native
    expiry.
    """

    name: str = "base"

    @abstractmethod
    async def save(self, secret_id: str, secret: StoredSecret) -> None:
        """Persist a secret under ``secret_id``."""

    @abstractmethod
    async def get(self, secret_id: str) -> Optional[StoredSecret]:
        """Fetch a secret, or None if absent."""

    @abstractmethod
    async def delete(self, secret_id: str) -> None:
        """Remove a secret. Deleting an absent id is a no-op."""

    @abstractmethod
    async def sweep_expired(self, now_ms: int) -> int:
        """Remove entries with ``now_ms >= expiration_time``.

        Returns:
            Number of entries removed
        """

    async def ping(self) -> bool:
        """Check the backend is reachable."""
        return True

    async def close(self) -> None:
        """Release backend resources."""
