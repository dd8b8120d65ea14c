"""Monitoring module for BurnRead.

This module provides:
- Message and latency metrics with JSON and Prometheus rendering
- Health check with storage probing
"""

from .health import HealthCheck
from .metrics import Counter, Histogram, MetricsCollector

__all__ = [
    "Counter",
    "Histogram",
    "MetricsCollector",
    "HealthCheck",
]
