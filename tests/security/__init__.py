"""Tests for security module."""

import pytest


def test_security_imports():
    """Test that security module can be imported."""
    from burnread.security import (
        CryptoEnvelope,
        DecryptionError,
        EncryptionError,
        generate_key,
        load_key,
        FixedWindowRateLimiter,
        RateLimitConfig,
        RateLimitExceeded,
    )

    assert CryptoEnvelope is not None
    assert FixedWindowRateLimiter is not None
    assert issubclass(DecryptionError, EncryptionError)
