"""Time-bounded storage backends for BurnRead.

This module provides:
- SecretStorage interface
- In-process storage with periodic sweep
- Redis storage with native key expiry
"""

import logging
from typing import Any

from .base import SecretStorage, StorageError
from .memory import InMemoryStorage
from .redis_store import RedisStorage

logger = logging.getLogger(__name__)


def create_storage(settings: Any) -> SecretStorage:
    """Select the storage backend from configuration.

    Args:
        settings: Application settings (``storage_type`` and Redis parameters)

    Returns:
        Configured storage backend

    Raises:
        ValueError: If the storage type is unknown
    """
    storage_type = settings.storage_type.lower()
    if storage_type == "redis":
        return RedisStorage.from_settings(settings)
    if storage_type == "memory":
        logger.info("Using in-memory storage")
        return InMemoryStorage()
    raise ValueError(f"Unknown storage type: {settings.storage_type}")


__all__ = [
    "SecretStorage",
    "StorageError",
    "InMemoryStorage",
    "RedisStorage",
    "create_storage",
]
