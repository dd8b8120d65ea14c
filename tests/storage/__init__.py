"""Tests for storage module."""

import pytest


def test_storage_imports():
    """Test that storage module can be imported."""
    from burnread.storage import (
        SecretStorage,
        StorageError,
        InMemoryStorage,
        RedisStorage,
        create_storage,
    )

    assert issubclass(InMemoryStorage, SecretStorage)
    assert issubclass(RedisStorage, SecretStorage)
