"""Performance metric collection: bounded metric store plus derived statistics."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, TypeVar
from uuid import uuid4

import structlog

from telemetry_core.config import PerformanceThresholds
from telemetry_core.domain.models import MetricCategory
from telemetry_core.domain.performance import (
    HourlyResponseTime,
    Metric,
    PerformanceIssue,
    PerformanceStatistics,
)
from telemetry_core.evaluator.statistics import (
    compute_category_statistics,
    compute_statistics,
    detect_performance_issues,
    hourly_response_times,
)
from telemetry_core.port.clock_port import Clock

logger = structlog.get_logger(component="performance")

T = TypeVar("T")

DEFAULT_MAX_METRICS = 1000


@dataclass(frozen=True)
class ActiveOperation:
    """Start mark of an operation timed with start/end_operation."""

    name: str
    category: MetricCategory
    start: float  # clock.monotonic() seconds


class PerformanceMonitor:
    """Records timings into a bounded FIFO buffer.

    Statistics are recomputed from the buffer on every read.
    """

    def __init__(
        self,
        clock: Clock,
        thresholds: PerformanceThresholds | None = None,
        max_metrics: int = DEFAULT_MAX_METRICS,
    ) -> None:
        self._clock = clock
        self._thresholds = thresholds or PerformanceThresholds()
        self._max_metrics = max_metrics
        self._metrics: list[Metric] = []
        self._active: dict[str, ActiveOperation] = {}
        self._recording = True

    @property
    def metrics(self) -> list[Metric]:
        return list(self._metrics)

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def active_operations(self) -> dict[str, ActiveOperation]:
        return dict(self._active)

    @property
    def thresholds(self) -> PerformanceThresholds:
        return self._thresholds

    # --- Instrumentation ---

    def start_operation(
        self, operation_id: str, name: str, category: MetricCategory | str
    ) -> None:
        """Mark the start of an operation finished later by end_operation."""
        if not self._recording:
            return
        self._active[operation_id] = ActiveOperation(
            name=name,
            category=MetricCategory(category),
            start=self._clock.monotonic(),
        )

    def end_operation(
        self,
        operation_id: str,
        success: bool = True,
        metadata: dict[str, Any] | None = None,
    ) -> Metric | None:
        """Record the elapsed time since start_operation and discard the mark."""
        operation = self._active.pop(operation_id, None)
        if not self._recording:
            return None
        if operation is None:
            logger.debug("end_operation for unknown operation", operation_id=operation_id)
            return None

        duration_ms = (self._clock.monotonic() - operation.start) * 1000
        metric = Metric(
            id=operation_id,
            name=operation.name,
            category=operation.category,
            duration=duration_ms,
            timestamp=self._clock.now(),
            success=success,
            metadata=metadata or {},
        )
        self._append(metric)
        return metric

    def record_metric(
        self,
        name: str,
        category: MetricCategory | str,
        duration: float,
        success: bool = True,
        metadata: dict[str, Any] | None = None,
    ) -> Metric | None:
        """Record an externally measured duration (ms)."""
        if not self._recording:
            return None

        category = MetricCategory(category)
        metric = Metric(
            id=self._new_id(category),
            name=name,
            category=category,
            duration=duration,
            timestamp=self._clock.now(),
            success=success,
            metadata=metadata or {},
        )
        self._append(metric)
        return metric

    async def measure_function(
        self,
        fn: Callable[[], Awaitable[T]],
        name: str,
        category: MetricCategory | str,
        metadata: dict[str, Any] | None = None,
    ) -> T:
        """Await ``fn`` and record exactly one metric for the call.

        Failures are recorded with the error message in metadata, then re-raised.
        """
        start = self._clock.monotonic()
        try:
            result = await fn()
        except BaseException as e:
            self._record_elapsed(name, category, start, False, metadata, e)
            raise

        self._record_elapsed(name, category, start, True, metadata)
        return result

    def measure_sync_function(
        self,
        fn: Callable[[], T],
        name: str,
        category: MetricCategory | str,
        metadata: dict[str, Any] | None = None,
    ) -> T:
        """Synchronous counterpart of measure_function."""
        start = self._clock.monotonic()
        try:
            result = fn()
        except Exception as e:
            self._record_elapsed(name, category, start, False, metadata, e)
            raise

        self._record_elapsed(name, category, start, True, metadata)
        return result

    def start_recording(self) -> None:
        self._recording = True

    def stop_recording(self) -> None:
        self._recording = False

    def clear_metrics(self) -> None:
        self._metrics.clear()
        self._active.clear()

    # --- Derived views ---

    def statistics(self) -> dict[MetricCategory, PerformanceStatistics]:
        return compute_category_statistics(self._metrics)

    def overall_statistics(self) -> PerformanceStatistics:
        return compute_statistics(self._metrics)

    def recent_metrics(self, window: timedelta = timedelta(hours=1)) -> list[Metric]:
        cutoff = self._clock.now() - window
        return [m for m in self._metrics if m.timestamp > cutoff]

    def slow_requests(self) -> list[Metric]:
        """Metrics slower than their category's tolerable threshold."""
        return [
            m
            for m in self._metrics
            if m.duration > self._thresholds.get_threshold(m.category).tolerable
        ]

    def performance_issues(self) -> list[PerformanceIssue]:
        return detect_performance_issues(self.statistics(), self._thresholds)

    def get_metrics_by_time_range(self, start: datetime, end: datetime) -> list[Metric]:
        return [m for m in self._metrics if start <= m.timestamp <= end]

    def get_average_response_time_by_hour(self, hours: int = 24) -> list[HourlyResponseTime]:
        return hourly_response_times(self._metrics, self._clock.now(), hours)

    def export_metrics(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        category: MetricCategory | str | None = None,
    ) -> dict[str, Any]:
        """JSON-serializable snapshot of matching metrics and their statistics.

        Statistics are computed over the filtered set; with no filters they
        equal the live statistics.
        """
        wanted = MetricCategory(category) if category is not None else None
        selected = [
            m
            for m in self._metrics
            if (start is None or m.timestamp >= start)
            and (end is None or m.timestamp <= end)
            and (wanted is None or m.category == wanted)
        ]

        return {
            "metrics": [m.to_dict() for m in selected],
            "statistics": {
                c.value: s.to_dict() for c, s in compute_category_statistics(selected).items()
            },
            "overall_statistics": compute_statistics(selected).to_dict(),
            "exported_at": self._clock.now().isoformat(),
            "filters": {
                "start": start.isoformat() if start else None,
                "end": end.isoformat() if end else None,
                "category": wanted.value if wanted else None,
            },
        }

    def _record_elapsed(
        self,
        name: str,
        category: MetricCategory | str,
        start: float,
        success: bool,
        metadata: dict[str, Any] | None,
        error: BaseException | None = None,
    ) -> None:
        duration = (self._clock.monotonic() - start) * 1000
        if error is not None:
            metadata = {**(metadata or {}), "error": _error_message(error)}
        self.record_metric(name, category, duration, success, metadata)

    def _append(self, metric: Metric) -> None:
        self._metrics.append(metric)
        overflow = len(self._metrics) - self._max_metrics
        if overflow > 0:
            del self._metrics[:overflow]

    @staticmethod
    def _new_id(category: MetricCategory) -> str:
        return f"{category.value}_{uuid4().hex}"


def _error_message(error: BaseException) -> str:
    return str(error) or type(error).__name__
