"""Unit tests for Prometheus metrics instrumentation."""

import pytest
from prometheus_client import REGISTRY

from contentsearch.observability.metrics import track_operation


def _count(operation: str, outcome: str) -> float:
    value = REGISTRY.get_sample_value(
        "search_index_operations_total",
        {"operation": operation, "outcome": outcome},
    )
    return value or 0.0


def test_successful_operation_is_counted() -> None:
    before = _count("unit_ok", "success")

    with track_operation("unit_ok"):
        pass

    assert _count("unit_ok", "success") == before + 1


def test_failed_operation_is_counted_and_reraised() -> None:
    before = _count("unit_fail", "error")

    with pytest.raises(KeyError):
        with track_operation("unit_fail"):
            raise KeyError("boom")

    assert _count("unit_fail", "error") == before + 1
    assert _count("unit_fail", "success") == 0.0


def test_latency_is_observed() -> None:
    with track_operation("unit_latency"):
        pass

    count = REGISTRY.get_sample_value(
        "search_index_operation_duration_seconds_count",
        {"operation": "unit_latency"},
    )
    assert count is not None and count >= 1
