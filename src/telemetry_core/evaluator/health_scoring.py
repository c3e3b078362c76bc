"""Component health classification and overall system score."""

from collections.abc import Mapping

from telemetry_core.config import HealthThresholds
from telemetry_core.domain.health import ComponentHealth
from telemetry_core.domain.models import HealthStatus


def classify_component(
    response_time: float,
    error_rate: float,
    thresholds: HealthThresholds,
) -> HealthStatus:
    """Classify a probe result.

    Exceeding either degraded bound is critical; exceeding either healthy
    bound is degraded.
    """
    if (
        error_rate > thresholds.error_rate_degraded
        or response_time > thresholds.response_time_degraded_ms
    ):
        return HealthStatus.CRITICAL
    if (
        error_rate > thresholds.error_rate_healthy
        or response_time > thresholds.response_time_healthy_ms
    ):
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


def calculate_overall_health(
    components: Mapping[str, ComponentHealth],
) -> tuple[HealthStatus, float]:
    """Combine component health into an overall status and 0-100 score.

    - critical components: score ``max(0, 50 - 20 * critical)``
    - degraded components: score ``max(50, 80 - 15 * degraded)``
    - all healthy: mean of a response time sub-score and an error rate
      sub-score, each floored at 0
    """
    statuses = list(components.values())
    if not statuses:
        return HealthStatus.HEALTHY, 100.0

    critical_count = sum(1 for c in statuses if c.status == HealthStatus.CRITICAL)
    degraded_count = sum(1 for c in statuses if c.status == HealthStatus.DEGRADED)

    if critical_count > 0:
        return HealthStatus.CRITICAL, max(0.0, 50.0 - critical_count * 20)
    if degraded_count > 0:
        return HealthStatus.DEGRADED, max(50.0, 80.0 - degraded_count * 15)

    avg_response_time = sum(c.response_time for c in statuses) / len(statuses)
    avg_error_rate = sum(c.error_rate for c in statuses) / len(statuses)

    response_time_score = max(0.0, 100.0 - avg_response_time / 50)
    error_rate_score = max(0.0, 100.0 - avg_error_rate * 1000)

    return HealthStatus.HEALTHY, min(100.0, (response_time_score + error_rate_score) / 2)
