"""Performance statistics over metric snapshots.

All functions are pure: they take the current buffer contents and return
fresh aggregates, so callers recompute on read instead of caching.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from telemetry_core.config import PerformanceThresholds
from telemetry_core.domain.models import IssueSeverity, MetricCategory
from telemetry_core.domain.performance import (
    HourlyResponseTime,
    Metric,
    PerformanceIssue,
    PerformanceStatistics,
)

CATEGORY_TOP_N = 5
OVERALL_TOP_N = 10


def percentile(sorted_values: Sequence[float], fraction: float) -> float:
    """Value at index ``floor(n * fraction)`` of an ascending sequence, 0 if empty."""
    if not sorted_values:
        return 0.0
    index = min(math.floor(len(sorted_values) * fraction), len(sorted_values) - 1)
    return sorted_values[index]


def compute_statistics(metrics: Sequence[Metric], top_n: int = OVERALL_TOP_N) -> PerformanceStatistics:
    """Aggregate statistics for a list of metrics.

    Slowest/fastest lists use a stable sort, so equal durations keep
    their recording order.
    """
    if not metrics:
        return PerformanceStatistics()

    durations = sorted(m.duration for m in metrics)
    success_count = sum(1 for m in metrics if m.success)
    total = len(metrics)

    return PerformanceStatistics(
        average_response_time=sum(durations) / total,
        p95_response_time=percentile(durations, 0.95),
        p99_response_time=percentile(durations, 0.99),
        success_rate=success_count / total,
        total_requests=total,
        error_count=total - success_count,
        slowest_requests=sorted(metrics, key=lambda m: m.duration, reverse=True)[:top_n],
        fastest_requests=sorted(metrics, key=lambda m: m.duration)[:top_n],
    )


def compute_category_statistics(
    metrics: Sequence[Metric],
) -> dict[MetricCategory, PerformanceStatistics]:
    """Statistics for every category, including empty ones."""
    return {
        category: compute_statistics(
            [m for m in metrics if m.category == category], top_n=CATEGORY_TOP_N
        )
        for category in MetricCategory
    }


def detect_performance_issues(
    statistics: dict[MetricCategory, PerformanceStatistics],
    thresholds: PerformanceThresholds,
) -> list[PerformanceIssue]:
    """Derive threshold breaches from per-category statistics.

    Categories without samples are skipped.
    """
    issues: list[PerformanceIssue] = []

    for category, stats in statistics.items():
        if stats.total_requests == 0:
            continue
        bounds = thresholds.get_threshold(category)
        name = category.value
        avg = stats.average_response_time

        if avg > bounds.tolerable:
            issues.append(
                PerformanceIssue(
                    category=category,
                    message=(
                        f"Average {name} response time ({round(avg)}ms) exceeds "
                        f"tolerable threshold ({bounds.tolerable:g}ms)"
                    ),
                    severity=IssueSeverity.ERROR,
                )
            )
        elif avg > bounds.acceptable:
            issues.append(
                PerformanceIssue(
                    category=category,
                    message=(
                        f"Average {name} response time ({round(avg)}ms) exceeds "
                        f"acceptable threshold ({bounds.acceptable:g}ms)"
                    ),
                    severity=IssueSeverity.WARNING,
                )
            )

        rate_pct = round(stats.success_rate * 100)
        if stats.success_rate < thresholds.success_rate_error:
            issues.append(
                PerformanceIssue(
                    category=category,
                    message=(
                        f"{name} success rate ({rate_pct}%) is below "
                        f"{round(thresholds.success_rate_error * 100)}%"
                    ),
                    severity=IssueSeverity.ERROR,
                )
            )
        elif stats.success_rate < thresholds.success_rate_warn:
            issues.append(
                PerformanceIssue(
                    category=category,
                    message=(
                        f"{name} success rate ({rate_pct}%) is below "
                        f"{round(thresholds.success_rate_warn * 100)}%"
                    ),
                    severity=IssueSeverity.WARNING,
                )
            )

    return issues


def hour_label(moment: datetime) -> str:
    """ISO hour bucket label, e.g. ``2025-01-01T13:00``."""
    return moment.isoformat()[:13] + ":00"


def hourly_response_times(
    metrics: Iterable[Metric], now: datetime, hours: int = 24
) -> list[HourlyResponseTime]:
    """Average duration per hour window, oldest first.

    Window i covers ``(now - (i+1)h, now - i h]`` for i in ``hours-1 .. 0``.
    """
    snapshot = list(metrics)
    buckets: list[HourlyResponseTime] = []
    for start, end in hour_windows(now, hours):
        in_hour = [m for m in snapshot if start < m.timestamp <= end]
        average = sum(m.duration for m in in_hour) / len(in_hour) if in_hour else 0.0
        buckets.append(
            HourlyResponseTime(hour=hour_label(start), average_time=average, request_count=len(in_hour))
        )
    return buckets


def hour_windows(now: datetime, hours: int) -> list[tuple[datetime, datetime]]:
    """``(start, end)`` pairs for the last ``hours`` hours, oldest first."""
    return [
        (now - timedelta(hours=i + 1), now - timedelta(hours=i))
        for i in range(hours - 1, -1, -1)
    ]
