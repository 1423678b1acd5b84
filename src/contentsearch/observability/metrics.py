"""Prometheus metrics instrumentation for search index operations."""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

OPERATION_COUNT = Counter(
    "search_index_operations_total",
    "Total search index operations",
    ["operation", "outcome"],
)
OPERATION_LATENCY = Histogram(
    "search_index_operation_duration_seconds",
    "Search index operation duration in seconds",
    ["operation"],
)
RESULTS_RETURNED = Histogram(
    "search_results_returned",
    "Number of results returned per search",
    buckets=(0, 1, 2, 4, 8, 16, 32, 64, 128),
)


@contextmanager
def track_operation(operation: str) -> Iterator[None]:
    """Record latency and outcome of one index/query operation."""
    start = time.perf_counter()
    outcome = "error"
    try:
        yield
        outcome = "success"
    finally:
        OPERATION_LATENCY.labels(operation=operation).observe(time.perf_counter() - start)
        OPERATION_COUNT.labels(operation=operation, outcome=outcome).inc()
