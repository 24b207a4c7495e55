"""
Error metrics recorder.

Keeps a rolling record of the errors returned to clients: totals by type,
status code and endpoint, plus three sliding windows (last hour, day and
week) pruned by age on every insertion. Exposes snapshots and an error
rate (errors per minute) for threshold-based alerting.

One instance is created per application and kept on ``app.state``.
"""

import threading
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from app.domain.catalog.errors import CatalogError

UNKNOWN = "unknown"
DEFAULT_ERROR_RATE_THRESHOLD = 2.0


class TimeWindow(str, Enum):
    """Sliding windows tracked by the recorder."""

    LAST_HOUR = "lastHour"
    LAST_DAY = "lastDay"
    LAST_WEEK = "lastWeek"

    @property
    def duration(self) -> timedelta:
        return _WINDOW_DURATIONS[self]

    @property
    def minutes(self) -> float:
        return self.duration.total_seconds() / 60


_WINDOW_DURATIONS = {
    TimeWindow.LAST_HOUR: timedelta(hours=1),
    TimeWindow.LAST_DAY: timedelta(days=1),
    TimeWindow.LAST_WEEK: timedelta(weeks=1),
}


@dataclass(frozen=True)
class ErrorRecord:
    """One recorded error occurrence."""

    timestamp: datetime
    error_type: str
    status_code: int
    message: str
    endpoint: str
    request_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "type": self.error_type,
            "statusCode": self.status_code,
            "message": self.message,
            "endpoint": self.endpoint,
            "requestId": self.request_id,
        }


class ErrorMetrics:
    """Thread-safe rolling error recorder.

    Args:
        clock: Returns the current UTC time. Injected by tests.
    """

    def __init__(
        self, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._reset_state()

    def _reset_state(self) -> None:
        self._total = 0
        self._by_type: Counter[str] = Counter()
        self._by_status: Counter[int] = Counter()
        self._by_endpoint: Counter[str] = Counter()
        self._windows: dict[TimeWindow, list[ErrorRecord]] = {w: [] for w in TimeWindow}

    def record(
        self,
        error: CatalogError,
        endpoint: str | None = None,
        request_id: str | None = None,
    ) -> ErrorRecord:
        """Record an error occurrence and prune expired window entries.

        Args:
            error: The taxonomy error returned to the client.
            endpoint: "METHOD /path" of the failing request.
            request_id: Correlation id of the failing request.

        Returns:
            The stored record.
        """
        record = ErrorRecord(
            timestamp=self._clock(),
            error_type=type(error).__name__,
            status_code=error.status_code,
            message=error.message,
            endpoint=endpoint or UNKNOWN,
            request_id=request_id or UNKNOWN,
        )
        with self._lock:
            self._total += 1
            self._by_type[record.error_type] += 1
            self._by_status[record.status_code] += 1
            self._by_endpoint[record.endpoint] += 1
            for window in TimeWindow:
                self._windows[window].append(record)
            self._prune(record.timestamp)
        return record

    def _prune(self, now: datetime) -> None:
        for window, records in self._windows.items():
            cutoff = now - window.duration
            self._windows[window] = [r for r in records if r.timestamp > cutoff]

    def recent(self, limit: int = 10) -> list[ErrorRecord]:
        """Return up to ``limit`` most recent errors from the last hour, oldest first."""
        with self._lock:
            records = self._windows[TimeWindow.LAST_HOUR]
            return list(records[-limit:]) if limit > 0 else []

    def count(self, window: TimeWindow = TimeWindow.LAST_HOUR) -> int:
        with self._lock:
            return len(self._windows[window])

    def error_rate(self, window: TimeWindow = TimeWindow.LAST_HOUR) -> float:
        """Errors per minute over the window."""
        return self.count(window) / window.minutes

    def is_error_rate_high(
        self,
        threshold: float = DEFAULT_ERROR_RATE_THRESHOLD,
        window: TimeWindow = TimeWindow.LAST_HOUR,
    ) -> bool:
        return self.error_rate(window) > threshold

    def get_stats(self, recent_limit: int = 10) -> dict[str, Any]:
        """Return a JSON-ready snapshot of every counter and window."""
        with self._lock:
            summary = {
                "totalErrors": self._total,
                "errorsLastHour": len(self._windows[TimeWindow.LAST_HOUR]),
                "errorsLastDay": len(self._windows[TimeWindow.LAST_DAY]),
                "errorsLastWeek": len(self._windows[TimeWindow.LAST_WEEK]),
            }
            breakdown = {
                "byType": dict(self._by_type),
                "byStatusCode": {str(k): v for k, v in self._by_status.items()},
                "byEndpoint": dict(self._by_endpoint),
            }
        return {
            "summary": summary,
            "breakdown": breakdown,
            "recent": [r.to_dict() for r in self.recent(recent_limit)],
        }

    def reset(self) -> None:
        """Forget everything recorded so far."""
        with self._lock:
            self._reset_state()
