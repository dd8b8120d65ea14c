"""Tests for in-memory storage."""

import pytest

from burnread.config import Settings
from burnread.models import EncryptedPayload, StoredSecret
from burnread.storage import InMemoryStorage, RedisStorage, create_storage


def _secret(expiration_time: int) -> StoredSecret:
    return StoredSecret(
        content=EncryptedPayload(ciphertext=b"c" * 20, iv=b"i" * 12),
        expiration_time=expiration_time,
    )


class TestInMemoryStorage:
    """Test InMemoryStorage operations."""

    @pytest.mark.asyncio
    async def test_save_and_get(self, storage):
        secret = _secret(5000)
        await storage.save("a", secret)
        assert await storage.get("a") == secret
        assert "a" in storage

    @pytest.mark.asyncio
    async def test_get_missing(self, storage):
        assert await storage.get("missing") is None

    @pytest.mark.asyncio
    async def test_get_does_not_filter_expired(self, storage):
        """Test that expiry is the caller's decision."""
        await storage.save("a", _secret(1))
        assert await storage.get("a") is not None

    @pytest.mark.asyncio
    async def test_delete(self, storage):
        await storage.save("a", _secret(5000))
        await storage.delete("a")
        assert await storage.get("a") is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, storage):
        await storage.delete("missing")
        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_sweep_expired(self, storage):
        """Test that sweep removes entries with now >= expiration."""
        await storage.save("past", _secret(900))
        await storage.save("boundary", _secret(1000))
        await storage.save("future", _secret(1001))

        removed = await storage.sweep_expired(1000)

        assert removed == 2
        assert "future" in storage
        assert len(storage) == 1

    @pytest.mark.asyncio
    async def test_sweep_empty(self, storage):
        assert await storage.sweep_expired(1000) == 0

    @pytest.mark.asyncio
    async def test_ping(self, storage):
        assert await storage.ping() is True

    @pytest.mark.asyncio
    async def test_close_clears(self, storage):
        await storage.save("a", _secret(5000))
        await storage.close()
        assert len(storage) == 0


class TestCreateStorage:
    """Test backend selection."""

    def test_memory(self):
        storage = create_storage(Settings(_env_file=None))
        assert isinstance(storage, InMemoryStorage)

    def test_redis(self):
        settings = Settings(_env_file=None, storage_type="redis")
        storage = create_storage(settings)
        assert isinstance(storage, RedisStorage)
        assert storage.key_prefix == "burnread:"
