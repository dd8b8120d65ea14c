"""Tests for safety module."""

import pytest


def test_safety_imports():
    """Test that safety module can be imported."""
    from burnread.safety import (
        MessageValidator,
        ValidationError,
        ValidationResult,
    )

    assert MessageValidator is not None
    assert ValidationResult(True).error is None
