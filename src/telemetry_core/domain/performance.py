"""Performance metric models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from telemetry_core.domain.models import IssueSeverity, MetricCategory


@dataclass(frozen=True)
class Metric:
    """A single recorded timing. Immutable once recorded."""

    id: str
    name: str
    category: MetricCategory
    duration: float
    timestamp: datetime
    success: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "duration": round(self.duration, 3),
            "timestamp": self.timestamp.isoformat(),
            "success": self.success,
            "metadata": dict(self.metadata),
        }


@dataclass
class PerformanceStatistics:
    """Aggregate statistics over a set of metrics."""

    average_response_time: float = 0.0
    p95_response_time: float = 0.0
    p99_response_time: float = 0.0
    success_rate: float = 0.0
    total_requests: int = 0
    error_count: int = 0
    slowest_requests: list[Metric] = field(default_factory=list)
    fastest_requests: list[Metric] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "average_response_time": round(self.average_response_time, 3),
            "p95_response_time": round(self.p95_response_time, 3),
            "p99_response_time": round(self.p99_response_time, 3),
            "success_rate": round(self.success_rate, 4),
            "total_requests": self.total_requests,
            "error_count": self.error_count,
            "slowest_requests": [m.to_dict() for m in self.slowest_requests],
            "fastest_requests": [m.to_dict() for m in self.fastest_requests],
        }


@dataclass(frozen=True)
class PerformanceIssue:
    """A threshold breach derived from category statistics."""

    category: MetricCategory
    message: str
    severity: IssueSeverity

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class HourlyResponseTime:
    """Average response time for one hour bucket."""

    hour: str
    average_time: float
    request_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour,
            "average_time": round(self.average_time, 3),
            "request_count": self.request_count,
        }
