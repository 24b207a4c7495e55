"""
Tests for the rolling error metrics recorder.

A controllable clock drives window pruning and error rates.
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.catalog.errors import CatalogError, NotFoundError, ValidationError
from app.shared.observability.error_metrics import ErrorMetrics, TimeWindow


class FakeClock:
    """Clock whose time only moves when told to."""

    def __init__(self) -> None:
        self.now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def metrics(clock: FakeClock) -> ErrorMetrics:
    return ErrorMetrics(clock=clock)


class TestRecording:
    """Tests for recording and counting errors."""

    def test_counts_by_type_status_and_endpoint(self, metrics: ErrorMetrics) -> None:
        metrics.record(NotFoundError("Product", "9"), "GET /api/v1/products/9", "req-1")
        metrics.record(ValidationError("bad"), "GET /api/v1/products", "req-2")
        metrics.record(NotFoundError("Product", "8"), "GET /api/v1/products/8", "req-3")

        stats = metrics.get_stats()
        assert stats["summary"]["totalErrors"] == 3
        assert stats["breakdown"]["byType"] == {"NotFoundError": 2, "ValidationError": 1}
        assert stats["breakdown"]["byStatusCode"] == {"404": 2, "400": 1}
        assert stats["breakdown"]["byEndpoint"]["GET /api/v1/products"] == 1

    def test_record_contents(self, metrics: ErrorMetrics, clock: FakeClock) -> None:
        record = metrics.record(CatalogError("boom"), "POST /api/v1/products", "req-1")
        assert record.to_dict() == {
            "timestamp": clock.now.isoformat(),
            "type": "CatalogError",
            "statusCode": 500,
            "message": "boom",
            "endpoint": "POST /api/v1/products",
            "requestId": "req-1",
        }

    def test_missing_context_is_unknown(self, metrics: ErrorMetrics) -> None:
        record = metrics.record(CatalogError("boom"))
        assert record.endpoint == "unknown"
        assert record.request_id == "unknown"

    def test_reset(self, metrics: ErrorMetrics) -> None:
        metrics.record(CatalogError("boom"))
        metrics.reset()
        stats = metrics.get_stats()
        assert stats["summary"]["totalErrors"] == 0
        assert stats["breakdown"]["byType"] == {}
        assert stats["recent"] == []

    def test_concurrent_recording(self, metrics: ErrorMetrics) -> None:
        def worker() -> None:
            for _ in range(100):
                metrics.record(CatalogError("boom"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert metrics.get_stats()["summary"]["totalErrors"] == 800


class TestWindows:
    """Tests for sliding windows and pruning."""

    def test_old_errors_leave_shorter_windows(
        self, metrics: ErrorMetrics, clock: FakeClock
    ) -> None:
        metrics.record(CatalogError("first"))
        clock.advance(hours=2)
        metrics.record(CatalogError("second"))

        assert metrics.count(TimeWindow.LAST_HOUR) == 1
        assert metrics.count(TimeWindow.LAST_DAY) == 2
        assert metrics.count(TimeWindow.LAST_WEEK) == 2
        assert metrics.get_stats()["summary"]["totalErrors"] == 2

    def test_week_window_pruned(self, metrics: ErrorMetrics, clock: FakeClock) -> None:
        metrics.record(CatalogError("ancient"))
        clock.advance(days=8)
        metrics.record(CatalogError("fresh"))
        assert metrics.count(TimeWindow.LAST_WEEK) == 1

    def test_recent_is_limited_and_ordered(self, metrics: ErrorMetrics) -> None:
        for i in range(15):
            metrics.record(CatalogError(f"error {i}"))
        recent = metrics.recent(10)
        assert len(recent) == 10
        assert recent[0].message == "error 5"
        assert recent[-1].message == "error 14"
        assert len(metrics.get_stats(recent_limit=3)["recent"]) == 3

    def test_window_minutes(self) -> None:
        assert TimeWindow.LAST_HOUR.minutes == 60
        assert TimeWindow.LAST_DAY.minutes == 1440
        assert TimeWindow.LAST_WEEK.minutes == 10080


class TestErrorRate:
    """Tests for error rates and the high-rate check."""

    def test_rate_is_errors_per_minute(self, metrics: ErrorMetrics) -> None:
        for _ in range(30):
            metrics.record(CatalogError("boom"))
        assert metrics.error_rate(TimeWindow.LAST_HOUR) == 0.5

    def test_threshold_is_exclusive(self, metrics: ErrorMetrics) -> None:
        for _ in range(120):
            metrics.record(CatalogError("boom"))
        assert metrics.is_error_rate_high(threshold=2.0) is False
        metrics.record(CatalogError("boom"))
        assert metrics.is_error_rate_high(threshold=2.0) is True

    def test_no_errors(self, metrics: ErrorMetrics) -> None:
        assert metrics.error_rate() == 0.0
        assert metrics.is_error_rate_high() is False
