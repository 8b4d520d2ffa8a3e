"""Performance monitoring utilities using Prometheus metrics."""

from __future__ import annotations

import time
from contextlib import contextmanager

import psutil
from prometheus_client import Counter, Gauge, Histogram


visits_total = Counter(
    "promotion_visits_total",
    "Adjudicated visits",
    labelnames=("location", "outcome"),
)
audit_failures_total = Counter(
    "promotion_audit_failures_total",
    "Visit log entries that could not be written",
)
adjudication_duration = Histogram(
    "promotion_adjudication_duration_seconds",
    "Time spent adjudicating a visit",
)
db_connections = Gauge("db_connection_pool_size", "DB connection pool size")


class PerformanceMonitor:
    """Records adjudication timings and reports host resource usage."""

    @contextmanager
    def track_adjudication(self):
        start = time.perf_counter()
        try:
            yield
        finally:
            adjudication_duration.observe(time.perf_counter() - start)

    def record_db_pool(self, pool_size: int) -> None:
        db_connections.set(pool_size)

    def gather_host_metrics(self) -> dict:
        process = psutil.Process()
        memory_info = process.memory_info()
        return {
            "memory_rss": memory_info.rss,
            "cpu_percent": process.cpu_percent(interval=None),
            "threads": process.num_threads(),
        }
