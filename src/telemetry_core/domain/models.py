"""Shared enums and helpers for telemetry domain models."""

from datetime import datetime
from enum import Enum


class MetricCategory(str, Enum):
    """Categories of recorded timings."""

    API_CALL = "api_call"
    USER_INTERACTION = "user_interaction"
    PAGE_LOAD = "page_load"
    DATABASE_QUERY = "database_query"


class ErrorSource(str, Enum):
    """Where an error originated."""

    JAVASCRIPT = "javascript"
    API = "api"
    DATABASE = "database"
    USER_ACTION = "user_action"
    SYSTEM = "system"


class ErrorSeverity(str, Enum):
    """Error severity levels, ordered low to critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    ErrorSeverity.LOW: 1,
    ErrorSeverity.MEDIUM: 2,
    ErrorSeverity.HIGH: 3,
    ErrorSeverity.CRITICAL: 4,
}


class AlertConditionType(str, Enum):
    """Alert rule condition kinds."""

    ERROR_RATE = "error_rate"
    ERROR_COUNT = "error_count"
    NEW_ERROR = "new_error"
    SEVERITY = "severity"


class InteractionType(str, Enum):
    """User interaction kinds captured by RUM."""

    CLICK = "click"
    SCROLL = "scroll"
    INPUT = "input"
    FORM_SUBMIT = "form_submit"
    NAVIGATION = "navigation"


class VitalRating(str, Enum):
    """Core Web Vitals rating buckets."""

    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs-improvement"
    POOR = "poor"


class HealthStatus(str, Enum):
    """Component and overall system health."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    CRITICAL = "critical"


class IssueSeverity(str, Enum):
    """Severity of a derived performance issue."""

    WARNING = "warning"
    ERROR = "error"


def isoformat(value: datetime | None) -> str | None:
    """Serialize an optional datetime."""
    return value.isoformat() if value is not None else None
