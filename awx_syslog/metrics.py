"""Thread-safe counters for events received and forwarded."""

import threading
import time
from collections import defaultdict

NAMESPACE = "awx_syslog"


class Metrics:
    def __init__(self):
        self._lock = threading.Lock()
        self._logs_received = 0
        self._type_counts: dict[str, int] = defaultdict(int)
        self._forwarded = 0
        self._forward_errors = 0
        self._start_time = time.monotonic()

    def increment(self, logger_type: str = ""):
        """Count one parsed event."""
        with self._lock:
            self._logs_received += 1
            self._type_counts[logger_type or "unknown"] += 1

    def record_forwarded(self):
        with self._lock:
            self._forwarded += 1

    def record_forward_error(self):
        with self._lock:
            self._forward_errors += 1

    @property
    def logs_received(self) -> int:
        with self._lock:
            return self._logs_received

    def snapshot(self) -> dict:
        """Return a point-in-time snapshot of all metrics."""
        with self._lock:
            elapsed = time.monotonic() - self._start_time
            total = self._logs_received
            distribution = dict(self._type_counts)
            forwarded = self._forwarded
            errors = self._forward_errors

        return {
            f"{NAMESPACE}_logs_received": total,
            "logger_type_distribution": distribution,
            "forwarded": forwarded,
            "forward_errors": errors,
            "elapsed_seconds": round(elapsed, 2),
            "logs_per_second": round(total / elapsed, 2) if elapsed > 0 else 0.0,
        }
