"""Pytest configuration and fixtures for BurnRead tests."""

import os

import pytest
from unittest.mock import AsyncMock

from burnread.audit import AuditLogger
from burnread.config import Settings
from burnread.lifecycle import SecretLifecycle
from burnread.monitoring.metrics import MetricsCollector
from burnread.security.encryption import CryptoEnvelope
from burnread.security.rate_limiter import FixedWindowRateLimiter, RateLimitConfig
from burnread.service import SecretService
from burnread.storage.memory import InMemoryStorage

DEFAULT_TTL = 60_000
MAX_TTL = 3_600_000
START_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now += delta


@pytest.fixture(autouse=True)
def use_test_environment(monkeypatch):
    """Ensure no BURNREAD_* variables from the host leak into tests."""
    for name in list(os.environ):
        if name.startswith("BURNREAD_"):
            monkeypatch.delenv(name)


@pytest.fixture
def clock():
    """Millisecond clock for lifecycle tests."""
    return FakeClock(START_MS)


@pytest.fixture
def seconds_clock():
    """Second-resolution clock for rate limiter and health tests."""
    return FakeClock(1000.0)


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, default_ttl=DEFAULT_TTL, max_ttl=MAX_TTL)


@pytest.fixture
def envelope():
    return CryptoEnvelope()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def lifecycle(storage, clock):
    return SecretLifecycle(storage, default_ttl=DEFAULT_TTL, max_ttl=MAX_TTL, clock=clock)


@pytest.fixture
def rate_limiter(seconds_clock):
    return FixedWindowRateLimiter(
        RateLimitConfig(max_requests=3, window_seconds=1.0), clock=seconds_clock
    )


@pytest.fixture
def service(lifecycle, envelope, rate_limiter):
    """Service wired to in-memory storage and fake clocks."""
    return SecretService(
        lifecycle=lifecycle,
        envelope=envelope,
        rate_limiter=rate_limiter,
        metrics=MetricsCollector(),
        audit=AuditLogger(),
    )


@pytest.fixture
def mock_redis():
    """Mock redis.asyncio client."""
    redis = AsyncMock()
    redis.get.return_value = None
    redis.ping.return_value = True
    return redis
