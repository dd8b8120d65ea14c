"""Tests for resilience module."""

import pytest


def test_resilience_imports():
    """Test that resilience module can be imported."""
    from burnread.resilience import (
        with_async_timeout,
        OperationTimeoutError,
        REDIS_COMMAND_TIMEOUT,
        HEALTH_PROBE_TIMEOUT,
    )

    assert with_async_timeout is not None
