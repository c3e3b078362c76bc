"""Domain models for the telemetry engine."""

from telemetry_core.domain.error_records import (
    AlertCondition,
    AlertRule,
    ErrorGroup,
    ErrorRecord,
    ErrorStatistics,
)
from telemetry_core.domain.health import ComponentHealth, HealthErrorEntry, SystemHealthStatus
from telemetry_core.domain.models import (
    AlertConditionType,
    ErrorSeverity,
    ErrorSource,
    HealthStatus,
    InteractionType,
    IssueSeverity,
    MetricCategory,
    VitalRating,
)
from telemetry_core.domain.performance import Metric, PerformanceIssue, PerformanceStatistics
from telemetry_core.domain.sessions import (
    CoreWebVitals,
    DeviceInfo,
    PageView,
    RUMStatistics,
    UserInteraction,
    UserSession,
    VitalsScore,
)

__all__ = [
    "AlertCondition",
    "AlertConditionType",
    "AlertRule",
    "ComponentHealth",
    "CoreWebVitals",
    "DeviceInfo",
    "ErrorGroup",
    "ErrorRecord",
    "ErrorSeverity",
    "ErrorSource",
    "ErrorStatistics",
    "HealthErrorEntry",
    "HealthStatus",
    "InteractionType",
    "IssueSeverity",
    "Metric",
    "MetricCategory",
    "PageView",
    "PerformanceIssue",
    "PerformanceStatistics",
    "RUMStatistics",
    "SystemHealthStatus",
    "UserInteraction",
    "UserSession",
    "VitalRating",
    "VitalsScore",
]
