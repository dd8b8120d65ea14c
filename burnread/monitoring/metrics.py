"""Service metrics for BurnRead.

Tracks:
- Message events: created, read, expired, denied, not_found
- Request latency per endpoint

Rendered as JSON for ``/metrics`` or as Prometheus text.
"""

import logging
import threading
from typing import Any, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# Metric Classes (Lightweight implementation without prometheus_client dependency)
# =============================================================================


class Counter:
    """A counter metric that can only increase."""

    def __init__(self, name: str, description: str, labels: Optional[list[str]] = None):
        self.name = name
        self.description = description
        self._label_names = labels or []
        self._values: dict[tuple, float] = {}
        self._lock = threading.Lock()

    def labels(self, **kwargs) -> "CounterWithLabels":
        """Return a counter with specific labels."""
        label_values = tuple(kwargs.get(l, "") for l in self._label_names)
        return CounterWithLabels(self, label_values)

    def inc(self, value: float = 1.0) -> None:
        """Increment the counter."""
        self._inc_labels((), value)

    def _inc_labels(self, label_values: tuple, value: float = 1.0) -> None:
        if value < 0:
            raise ValueError("Counters can only increase")
        with self._lock:
            self._values[label_values] = self._values.get(label_values, 0) + value

    def get(self, **kwargs) -> float:
        """Get the value for one label combination."""
        label_values = tuple(kwargs.get(l, "") for l in self._label_names)
        with self._lock:
            return self._values.get(label_values, 0)

    def get_all(self) -> dict[tuple, float]:
        """Get all values."""
        with self._lock:
            return self._values.copy()

    def to_prometheus(self) -> str:
        """Format as Prometheus text."""
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} counter"]
        with self._lock:
            for label_values, value in self._values.items():
                if label_values:
                    labels_str = ",".join(
                        f'{l}="{v}"' for l, v in zip(self._label_names, label_values)
                    )
                    lines.append(f"{self.name}{{{labels_str}}} {value}")
                else:
                    lines.append(f"{self.name} {value}")
        return "\n".join(lines)


class CounterWithLabels:
    """Counter with specific label values."""

    def __init__(self, parent: Counter, label_values: tuple):
        self._parent = parent
        self._label_values = label_values

    def inc(self, value: float = 1.0) -> None:
        """Increment the counter."""
        self._parent._inc_labels(self._label_values, value)


class Histogram:
    """A histogram metric for tracking distributions.

    Keeps at most ``max_observations`` raw values per label set.
    """

    DEFAULT_BUCKETS = (5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000)

    def __init__(
        self,
        name: str,
        description: str,
        labels: Optional[list[str]] = None,
        buckets: Optional[tuple] = None,
        max_observations: int = 10_000,
    ):
        self.name = name
        self.description = description
        self._label_names = labels or []
        self.buckets = buckets or self.DEFAULT_BUCKETS
        self.max_observations = max_observations
        self._observations: dict[tuple, list[float]] = {}
        self._lock = threading.Lock()

    def labels(self, **kwargs) -> "HistogramWithLabels":
        """Return a histogram with specific labels."""
        label_values = tuple(kwargs.get(l, "") for l in self._label_names)
        return HistogramWithLabels(self, label_values)

    def observe(self, value: float) -> None:
        """Record an observation."""
        self._observe_labels((), value)

    def _observe_labels(self, label_values: tuple, value: float) -> None:
        with self._lock:
            observations = self._observations.setdefault(label_values, [])
            observations.append(value)
            if len(observations) > self.max_observations:
                del observations[0]

    def get_all(self) -> dict[tuple, list[float]]:
        """Get all observations."""
        with self._lock:
            return {k: v.copy() for k, v in self._observations.items()}

    def to_prometheus(self) -> str:
        """Format as Prometheus text."""
        lines = [
            f"# HELP {self.name} {self.description}",
            f"# TYPE {self.name} histogram",
        ]
        with self._lock:
            for label_values, observations in self._observations.items():
                total = sum(observations)
                count = len(observations)

                labels_prefix = ""
                if label_values:
                    labels_prefix = ",".join(
                        f'{l}="{v}"' for l, v in zip(self._label_names, label_values)
                    )
                sep = "," if labels_prefix else ""

                for bucket in self.buckets:
                    bucket_count = sum(1 for o in observations if o <= bucket)
                    lines.append(
                        f'{self.name}_bucket{{{labels_prefix}{sep}le="{bucket}"}} {bucket_count}'
                    )
                lines.append(f'{self.name}_bucket{{{labels_prefix}{sep}le="+Inf"}} {count}')

                suffix = f"{{{labels_prefix}}}" if labels_prefix else ""
                lines.append(f"{self.name}_sum{suffix} {total}")
                lines.append(f"{self.name}_count{suffix} {count}")

        return "\n".join(lines)


class HistogramWithLabels:
    """Histogram with specific label values."""

    def __init__(self, parent: Histogram, label_values: tuple):
        self._parent = parent
        self._label_values = label_values

    def observe(self, value: float) -> None:
        """Record an observation."""
        self._parent._observe_labels(self._label_values, value)


# =============================================================================
# Collector
# =============================================================================

MESSAGE_EVENTS = ("created", "read", "expired", "denied", "not_found")


class MetricsCollector:
    """Collects message and latency metrics for one service instance."""

    def __init__(self):
        self.messages_total = Counter(
            name="burnread_messages_total",
            description="Message lifecycle events",
            labels=["event"],
        )
        self.request_latency_ms = Histogram(
            name="burnread_request_latency_ms",
            description="Request latency in milliseconds",
            labels=["endpoint"],
        )

    def record_message_created(self) -> None:
        self.messages_total.labels(event="created").inc()

    def record_message_read(self) -> None:
        self.messages_total.labels(event="read").inc()

    def record_message_expired(self, count: int = 1) -> None:
        if count > 0:
            self.messages_total.labels(event="expired").inc(count)

    def record_message_denied(self) -> None:
        self.messages_total.labels(event="denied").inc()

    def record_message_not_found(self) -> None:
        self.messages_total.labels(event="not_found").inc()

    def record_latency(self, endpoint: str, latency_ms: float) -> None:
        self.request_latency_ms.labels(endpoint=endpoint).observe(latency_ms)

    def snapshot(self) -> dict[str, Any]:
        """Current metrics as a JSON-friendly dictionary."""
        messages = {
            event: int(self.messages_total.get(event=event)) for event in MESSAGE_EVENTS
        }
        latencies = {}
        for (endpoint,), observations in self.request_latency_ms.get_all().items():
            if not observations:
                continue
            latencies[endpoint] = {
                "avg": sum(observations) / len(observations),
                "min": min(observations),
                "max": max(observations),
                "count": len(observations),
            }
        return {"messages": messages, "latencies": latencies}

    def to_prometheus(self) -> str:
        """All metrics in Prometheus text format."""
        output = []
        for metric in (self.messages_total, self.request_latency_ms):
            prometheus_text = metric.to_prometheus()
            if prometheus_text.strip():
                output.append(prometheus_text)
        return "\n\n".join(output) + "\n"
