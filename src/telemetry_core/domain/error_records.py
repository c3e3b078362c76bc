"""Error tracking and alerting models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from telemetry_core.domain.models import (
    AlertConditionType,
    ErrorSeverity,
    ErrorSource,
    isoformat,
)


@dataclass
class ErrorRecord:
    """A captured error event.

    Records are mutated only for resolution state and tags; they are never
    deleted except by buffer eviction.
    """

    id: str
    message: str
    source: ErrorSource
    severity: ErrorSeverity
    timestamp: datetime
    fingerprint: str
    stack: str | None = None
    url: str = ""
    user_agent: str = ""
    user_id: str | None = None
    context: dict[str, Any] | None = None
    tags: list[str] = field(default_factory=list)
    resolved: bool = False
    resolved_at: datetime | None = None
    resolved_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "message": self.message,
            "stack": self.stack,
            "source": self.source.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "url": self.url,
            "user_agent": self.user_agent,
            "user_id": self.user_id,
            "context": self.context,
            "tags": list(self.tags),
            "fingerprint": self.fingerprint,
            "resolved": self.resolved,
            "resolved_at": isoformat(self.resolved_at),
            "resolved_by": self.resolved_by,
        }


@dataclass
class ErrorGroup:
    """Errors sharing a fingerprint. Derived from the live buffer, never stored."""

    fingerprint: str
    message: str
    source: ErrorSource
    severity: ErrorSeverity
    first_seen: datetime
    last_seen: datetime
    count: int = 0
    resolved: bool = False
    errors: list[ErrorRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fingerprint": self.fingerprint,
            "message": self.message,
            "source": self.source.value,
            "severity": self.severity.value,
            "count": self.count,
            "first_seen": self.first_seen.isoformat(),
            "last_seen": self.last_seen.isoformat(),
            "resolved": self.resolved,
            "error_ids": [e.id for e in self.errors],
        }


@dataclass
class ErrorStatistics:
    """Summary counts over the error buffer."""

    total: int = 0
    by_source: dict[str, int] = field(default_factory=dict)
    by_severity: dict[str, int] = field(default_factory=dict)
    error_rate: float = 0.0  # errors per minute over the last hour
    unique_errors: int = 0
    resolved_errors: int = 0
    average_resolution_time: float = 0.0  # minutes

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_source": dict(self.by_source),
            "by_severity": dict(self.by_severity),
            "error_rate": round(self.error_rate, 4),
            "unique_errors": self.unique_errors,
            "resolved_errors": self.resolved_errors,
            "average_resolution_time": round(self.average_resolution_time, 2),
        }


@dataclass(frozen=True)
class HourlyErrorCount:
    """Error volume for one hour bucket."""

    hour: str
    error_count: int
    unique_errors: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour,
            "error_count": self.error_count,
            "unique_errors": self.unique_errors,
        }


@dataclass
class AlertCondition:
    """When an alert rule should fire."""

    type: AlertConditionType
    threshold: float = 0.0
    time_window: float = 5.0  # minutes
    severity: ErrorSeverity | None = None
    source: ErrorSource | None = None

    def __post_init__(self) -> None:
        self.type = AlertConditionType(self.type)
        if self.severity is not None:
            self.severity = ErrorSeverity(self.severity)
        if self.source is not None:
            self.source = ErrorSource(self.source)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "threshold": self.threshold,
            "time_window": self.time_window,
            "severity": self.severity.value if self.severity else None,
            "source": self.source.value if self.source else None,
        }


@dataclass
class AlertRule:
    """A configurable alert over the error stream."""

    id: str
    name: str
    condition: AlertCondition
    enabled: bool = True
    cooldown_period: float = 15.0  # minutes
    webhook_url: str | None = None
    email_recipients: list[str] = field(default_factory=list)
    last_triggered: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "condition": self.condition.to_dict(),
            "enabled": self.enabled,
            "cooldown_period": self.cooldown_period,
            "webhook_url": self.webhook_url,
            "email_recipients": list(self.email_recipients),
            "last_triggered": isoformat(self.last_triggered),
        }
