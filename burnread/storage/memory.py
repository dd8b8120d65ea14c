"""In-process secret storage with sweep-based expiry."""

import logging
import threading
from typing import Optional

from ..models import StoredSecret
from .base import SecretStorage

logger = logging.getLogger(__name__)


class InMemoryStorage(SecretStorage):
    """Thread-safe dictionary store.

    Entries are only reclaimed by ``sweep_expired``, so the periodic
    cleanup must run for memory to be released.
    """

    name = "memory"

    def __init__(self):
        self._secrets: dict[str, StoredSecret] = {}
        self._lock = threading.Lock()

    async def save(self, secret_id: str, secret: StoredSecret) -> None:
        with self._lock:
            self._secrets[secret_id] = secret

    async def get(self, secret_id: str) -> Optional[StoredSecret]:
        with self._lock:
            return self._secrets.get(secret_id)

    async def delete(self, secret_id: str) -> None:
        with self._lock:
            self._secrets.pop(secret_id, None)

    async def sweep_expired(self, now_ms: int) -> int:
        with self._lock:
            expired = [
                secret_id
                for secret_id, secret in self._secrets.items()
                if secret.is_expired(now_ms)
            ]
            for secret_id in expired:
                del self._secrets[secret_id]

        if expired:
            logger.debug(f"Swept {len(expired)} expired secrets")
        return len(expired)

    async def close(self) -> None:
        with self._lock:
            self._secrets.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._secrets)

    def __contains__(self, secret_id: object) -> bool:
        with self._lock:
            return secret_id in self._secrets
