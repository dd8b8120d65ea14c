"""Tests for monitoring module."""

import pytest


def test_monitoring_imports():
    """Test that all monitoring module components can be imported."""
    from burnread.monitoring import (
        Counter,
        Histogram,
        MetricsCollector,
        HealthCheck,
    )

    assert MetricsCollector is not None
    assert HealthCheck is not None
