"""Metrics service for tracking catalog query performance.

Singleton service to track call counts and latency per catalog operation.
"""

import threading
from typing import Dict


class _OperationStats:
    __slots__ = ("count", "errors", "total_ms", "min_ms", "max_ms")

    def __init__(self):
        self.count = 0
        self.errors = 0
        self.total_ms = 0.0
        self.min_ms = float('inf')
        self.max_ms = 0.0


class MetricsService:
    """Singleton service for tracking API metrics.

    Thread-safe counters and latency tracking per operation
    (catalog query, facets, product detail, recommendations).
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(MetricsService, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize metrics counters."""
        if self._initialized:
            return

        self._lock = threading.Lock()
        self._operations: Dict[str, _OperationStats] = {}
        self._initialized = True

    def record(self, operation: str, latency_ms: float, failed: bool = False) -> None:
        """Record one call of ``operation`` with its latency.

        Args:
            operation: Operation name, e.g. "query_catalog"
            latency_ms: Latency in milliseconds
            failed: Whether the call ended in an error
        """
        with self._lock:
            stats = self._operations.setdefault(operation, _OperationStats())
            stats.count += 1
            stats.total_ms += latency_ms
            if failed:
                stats.errors += 1

            if latency_ms < stats.min_ms:
                stats.min_ms = latency_ms

            if latency_ms > stats.max_ms:
                stats.max_ms = latency_ms

    def get_metrics(self) -> Dict:
        """Get current metrics.

        Returns:
            Dictionary keyed by operation name, each with:
            - count: Total number of calls
            - errors: Number of failed calls
            - average_latency_ms: Average latency in milliseconds
            - min_latency_ms: Minimum latency observed
            - max_latency_ms: Maximum latency observed
        """
        with self._lock:
            return {
                name: {
                    "count": stats.count,
                    "errors": stats.errors,
                    "average_latency_ms": round(stats.total_ms / stats.count, 2) if stats.count else 0.0,
                    "min_latency_ms": round(stats.min_ms, 2) if stats.min_ms != float('inf') else 0.0,
                    "max_latency_ms": round(stats.max_ms, 2),
                }
                for name, stats in self._operations.items()
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._operations = {}


# Global singleton instance
metrics_service = MetricsService()
