"""Error grouping and summary statistics over the error buffer."""

from collections.abc import Sequence
from datetime import datetime, timedelta

from telemetry_core.domain.error_records import ErrorGroup, ErrorRecord, ErrorStatistics, HourlyErrorCount
from telemetry_core.domain.models import ErrorSeverity, ErrorSource
from telemetry_core.evaluator.statistics import hour_label, hour_windows


def group_errors(errors: Sequence[ErrorRecord]) -> list[ErrorGroup]:
    """One group per fingerprint, most recently seen first.

    Group severity is the highest observed; a group is resolved only when
    every member is resolved.
    """
    groups: dict[str, ErrorGroup] = {}

    for error in errors:
        group = groups.get(error.fingerprint)
        if group is None:
            group = ErrorGroup(
                fingerprint=error.fingerprint,
                message=error.message,
                source=error.source,
                severity=error.severity,
                first_seen=error.timestamp,
                last_seen=error.timestamp,
            )
            groups[error.fingerprint] = group

        group.count += 1
        group.errors.append(error)
        if error.timestamp > group.last_seen:
            group.last_seen = error.timestamp
        if error.severity.rank > group.severity.rank:
            group.severity = error.severity

    for group in groups.values():
        group.resolved = all(e.resolved for e in group.errors)

    return sorted(groups.values(), key=lambda g: g.last_seen, reverse=True)


def compute_error_statistics(errors: Sequence[ErrorRecord], now: datetime) -> ErrorStatistics:
    """Counts by source and severity, hourly rate and resolution times."""
    by_source = {source.value: 0 for source in ErrorSource}
    by_severity = {severity.value: 0 for severity in ErrorSeverity}
    for error in errors:
        by_source[error.source.value] += 1
        by_severity[error.severity.value] += 1

    one_hour_ago = now - timedelta(hours=1)
    recent_count = sum(1 for e in errors if e.timestamp > one_hour_ago)

    resolved = [e for e in errors if e.resolved]
    resolution_minutes = sum(
        (e.resolved_at - e.timestamp).total_seconds() / 60 for e in resolved if e.resolved_at
    )

    return ErrorStatistics(
        total=len(errors),
        by_source=by_source,
        by_severity=by_severity,
        error_rate=recent_count / 60,
        unique_errors=len({e.fingerprint for e in errors}),
        resolved_errors=len(resolved),
        average_resolution_time=resolution_minutes / len(resolved) if resolved else 0.0,
    )


def hourly_error_counts(
    errors: Sequence[ErrorRecord], now: datetime, hours: int = 24
) -> list[HourlyErrorCount]:
    """Error and distinct-fingerprint counts per hour, oldest first."""
    buckets: list[HourlyErrorCount] = []
    for start, end in hour_windows(now, hours):
        in_hour = [e for e in errors if start < e.timestamp <= end]
        buckets.append(
            HourlyErrorCount(
                hour=hour_label(start),
                error_count=len(in_hour),
                unique_errors=len({e.fingerprint for e in in_hour}),
            )
        )
    return buckets
