"""MonitoringEngine: composition root owning every telemetry buffer."""

import httpx
import structlog

from telemetry_core.config import HealthThresholds, PerformanceThresholds, Settings
from telemetry_core.domain.models import MetricCategory
from telemetry_core.domain.sessions import DeviceInfo
from telemetry_core.exceptions import ConfigurationError
from telemetry_core.gateway.api_health_gateway import CallableDataLayerProbe, HttpApiHealthProbe
from telemetry_core.gateway.performance_timeline import PerformanceTimeline
from telemetry_core.gateway.system_clock import SystemClock
from telemetry_core.port.clock_port import Clock
from telemetry_core.port.health_probe_port import ApiHealthProbe, DataLayerProbe
from telemetry_core.port.notifier_port import Notifier
from telemetry_core.scheduler.health_scheduler import HealthScheduler
from telemetry_core.usecase.alert_evaluator import AlertEvaluator
from telemetry_core.usecase.error_tracker import ErrorTracker
from telemetry_core.usecase.health_aggregator import HealthAggregator
from telemetry_core.usecase.performance_monitor import PerformanceMonitor
from telemetry_core.usecase.session_tracker import SessionTracker
from telemetry_core.usecase.vitals_collector import VitalsCollector

logger = structlog.get_logger()


async def _noop_read() -> None:
    return None


class MonitoringEngine:
    """Wires the four monitors together.

    Each engine instance owns its own buffers, so tests and embedding
    applications can run several side by side. Components are exposed as
    ``performance``, ``errors``, ``rum`` and ``health``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        clock: Clock | None = None,
        notifier: Notifier | None = None,
        data_layer: DataLayerProbe | None = None,
        api_probe: ApiHealthProbe | None = None,
        http_client: httpx.AsyncClient | None = None,
        performance_thresholds: PerformanceThresholds | None = None,
        health_thresholds: HealthThresholds | None = None,
    ) -> None:
        self.settings = settings or Settings()
        performance_thresholds = performance_thresholds or PerformanceThresholds()
        health_thresholds = health_thresholds or HealthThresholds()
        validate_thresholds(performance_thresholds, health_thresholds)

        self.clock = clock or SystemClock()
        self.timeline = PerformanceTimeline()

        # --- Performance ---
        self.performance = PerformanceMonitor(
            self.clock, performance_thresholds, max_metrics=self.settings.max_metrics
        )

        # --- Errors ---
        self.alerts = AlertEvaluator(self.clock, notifier)
        self.errors = ErrorTracker(self.clock, self.alerts, max_errors=self.settings.max_errors)

        # --- RUM ---
        self.vitals = VitalsCollector(self.timeline)
        self.rum = SessionTracker(self.clock, self.vitals, max_sessions=self.settings.max_sessions)

        # --- Health ---
        self._owned_client: httpx.AsyncClient | None = None
        if api_probe is None:
            if http_client is None:
                http_client = httpx.AsyncClient(
                    timeout=httpx.Timeout(self.settings.health_check_timeout_seconds)
                )
                self._owned_client = http_client
            api_probe = HttpApiHealthProbe(http_client, self.settings)

        self.health = HealthAggregator(
            self.clock,
            data_layer=data_layer or CallableDataLayerProbe(_noop_read),
            api_probe=api_probe,
            runtime=self.timeline,
            thresholds=health_thresholds,
            timeout=self.settings.health_check_timeout_seconds,
            max_history=self.settings.max_health_history,
            error_retention_hours=self.settings.health_error_retention_hours,
            error_tracker=self.errors,
        )
        self.scheduler = HealthScheduler(self.health, self.settings)

    def start_monitoring(
        self, user_id: str | None = None, device_info: DeviceInfo | None = None
    ) -> None:
        """Enable recording and tracking and open a RUM session."""
        self.performance.start_recording()
        self.errors.start_tracking()
        self.rum.start_monitoring(user_id, device_info)
        logger.info("Monitoring started", user_id=user_id)

    def stop_monitoring(self) -> None:
        self.rum.stop_monitoring()
        self.errors.stop_tracking()
        self.performance.stop_recording()
        logger.info("Monitoring stopped")

    def start_health_monitoring(self) -> None:
        """Start periodic health checks. Requires a running event loop."""
        self.scheduler.start()

    def stop_health_monitoring(self) -> None:
        self.scheduler.stop()

    def reset(self) -> None:
        """Drop all buffered telemetry. Alert rules and lifecycle state are kept."""
        self.performance.clear_metrics()
        self.errors.clear_errors()
        self.rum.clear_sessions()
        self.vitals.reset()
        self.health.clear()
        self.timeline.clear()
        logger.info("Monitoring buffers reset")

    async def aclose(self) -> None:
        """Stop every background activity and release owned resources."""
        self.stop_health_monitoring()
        self.stop_monitoring()
        self.vitals.disconnect()
        self.errors.uninstall_global_handlers()
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None


def validate_thresholds(
    performance: PerformanceThresholds, health: HealthThresholds
) -> None:
    """Reject threshold sets whose lower bound exceeds the upper bound."""
    for category in MetricCategory:
        bounds = performance.get_threshold(category)
        if bounds.acceptable > bounds.tolerable:
            raise ConfigurationError(
                f"{category.value}: acceptable ({bounds.acceptable}ms) exceeds "
                f"tolerable ({bounds.tolerable}ms)"
            )
    if performance.success_rate_error > performance.success_rate_warn:
        raise ConfigurationError("success_rate_error must not exceed success_rate_warn")
    if health.response_time_healthy_ms > health.response_time_degraded_ms:
        raise ConfigurationError("response_time_healthy_ms must not exceed response_time_degraded_ms")
    if health.error_rate_healthy > health.error_rate_degraded:
        raise ConfigurationError("error_rate_healthy must not exceed error_rate_degraded")
