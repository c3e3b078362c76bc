"""System health aggregation over four component probes."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import timedelta

import structlog

from telemetry_core.config import HealthThresholds
from telemetry_core.domain.health import (
    COMPONENT_NAMES,
    ComponentHealth,
    HealthErrorEntry,
    SystemHealthStatus,
)
from telemetry_core.domain.models import ErrorSeverity, ErrorSource, HealthStatus
from telemetry_core.evaluator.health_scoring import calculate_overall_health, classify_component
from telemetry_core.port.clock_port import Clock
from telemetry_core.port.health_probe_port import ApiHealthProbe, DataLayerProbe
from telemetry_core.port.runtime_port import RuntimeTimings
from telemetry_core.usecase.error_tracker import ErrorTracker

logger = structlog.get_logger(component="health")

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_HISTORY = 100
DEFAULT_RETENTION_HOURS = 24

MEMORY_PRESSURE_RATIO = 0.8
MEMORY_PRESSURE_ERROR_RATE = 0.5
UX_SLOW_THRESHOLD_MS = 3000
UX_SLOW_ERROR_RATE = 0.3
UX_FALLBACK_MS = 1000.0

# (response_time_ms, error_rate, message)
ProbeResult = tuple[float, float, str | None]


class HealthAggregator:
    """Runs the component probes concurrently and keeps a bounded history.

    A probe that raises or exceeds the timeout marks its component critical;
    one failing probe never affects the others.
    """

    def __init__(
        self,
        clock: Clock,
        data_layer: DataLayerProbe,
        api_probe: ApiHealthProbe,
        runtime: RuntimeTimings,
        thresholds: HealthThresholds | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_history: int = DEFAULT_MAX_HISTORY,
        error_retention_hours: int = DEFAULT_RETENTION_HOURS,
        error_tracker: ErrorTracker | None = None,
    ) -> None:
        self._clock = clock
        self._data_layer = data_layer
        self._api_probe = api_probe
        self._runtime = runtime
        self._thresholds = thresholds or HealthThresholds()
        self._timeout = timeout
        self._max_history = max_history
        self._retention = timedelta(hours=error_retention_hours)
        self._error_tracker = error_tracker

        self._started = clock.monotonic()
        self._history: list[SystemHealthStatus] = []
        self._errors: list[HealthErrorEntry] = []
        self._status = SystemHealthStatus(
            overall=HealthStatus.HEALTHY,
            score=100.0,
            components={},
            last_checked=clock.now(),
            uptime=0.0,
            checks_performed=0,
        )

    @property
    def status(self) -> SystemHealthStatus:
        return self._status

    @property
    def history(self) -> list[SystemHealthStatus]:
        return list(self._history)

    @property
    def errors(self) -> list[HealthErrorEntry]:
        return list(self._errors)

    def is_healthy(self) -> bool:
        return self._status.overall == HealthStatus.HEALTHY

    def is_degraded(self) -> bool:
        return self._status.overall == HealthStatus.DEGRADED

    def is_critical(self) -> bool:
        return self._status.overall == HealthStatus.CRITICAL

    async def perform_health_check(self) -> SystemHealthStatus:
        """Probe every component, combine the results and append to history."""
        probes: dict[str, Callable[[], Awaitable[ProbeResult]]] = {
            "database": self._check_data_layer,
            "api": self._check_api,
            "frontend": self._check_frontend,
            "user_experience": self._check_user_experience,
        }
        results = await asyncio.gather(
            *(self._run_probe(name, probes[name]) for name in COMPONENT_NAMES)
        )
        components = dict(zip(COMPONENT_NAMES, results))
        overall, score = calculate_overall_health(components)

        now = self._clock.now()
        self._status = SystemHealthStatus(
            overall=overall,
            score=score,
            components=components,
            last_checked=now,
            uptime=self._clock.monotonic() - self._started,
            checks_performed=self._status.checks_performed + 1,
        )

        self._history.append(self._status)
        overflow = len(self._history) - self._max_history
        if overflow > 0:
            del self._history[:overflow]

        cutoff = now - self._retention
        self._errors = [e for e in self._errors if e.timestamp > cutoff]

        logger.info(
            "Health check completed",
            overall=overall.value,
            score=round(score, 2),
            checks_performed=self._status.checks_performed,
        )
        return self._status

    def record_error(self, component: str, message: str) -> HealthErrorEntry:
        entry = HealthErrorEntry(timestamp=self._clock.now(), component=component, error=message)
        self._errors.append(entry)
        return entry

    def recent_errors(self, window: timedelta = timedelta(hours=1)) -> list[HealthErrorEntry]:
        cutoff = self._clock.now() - window
        return [e for e in self._errors if e.timestamp > cutoff]

    def uptime_percentage(self) -> int:
        """Share of checks in history with healthy overall status, 0-100."""
        if not self._history:
            return 100
        healthy = sum(1 for h in self._history if h.overall == HealthStatus.HEALTHY)
        return round(healthy / len(self._history) * 100)

    def get_component_trend(self, component: str, hours: int = 1) -> str:
        """improving, stable or degrading from the component's healthy share."""
        cutoff = self._clock.now() - timedelta(hours=hours)
        statuses = [
            h.components[component].status
            for h in self._history
            if h.last_checked > cutoff and component in h.components
        ]
        if not statuses:
            return "stable"

        healthy_share = sum(1 for s in statuses if s == HealthStatus.HEALTHY) / len(statuses)
        if healthy_share > 0.8:
            return "improving"
        if healthy_share < 0.5:
            return "degrading"
        return "stable"

    def clear(self) -> None:
        self._history.clear()
        self._errors.clear()

    async def _run_probe(
        self, component: str, probe: Callable[[], Awaitable[ProbeResult]]
    ) -> ComponentHealth:
        start = self._clock.monotonic()
        try:
            response_time, error_rate, message = await asyncio.wait_for(probe(), self._timeout)
        except asyncio.TimeoutError:
            failure = f"{component} check timed out after {self._timeout}s"
        except Exception as e:
            failure = str(e) or type(e).__name__
        else:
            return ComponentHealth(
                status=classify_component(response_time, error_rate, self._thresholds),
                response_time=response_time,
                error_rate=error_rate,
                last_checked=self._clock.now(),
                message=message,
            )

        elapsed_ms = (self._clock.monotonic() - start) * 1000
        self._record_probe_failure(component, failure)
        return ComponentHealth(
            status=HealthStatus.CRITICAL,
            response_time=elapsed_ms,
            error_rate=1.0,
            last_checked=self._clock.now(),
            message=failure,
        )

    def _record_probe_failure(self, component: str, failure: str) -> None:
        logger.warning("Health probe failed", probe=component, error=failure)
        self.record_error(component, failure)
        if self._error_tracker is not None:
            self._error_tracker.record_error(
                f"Health check failed for {component}: {failure}",
                source=ErrorSource.SYSTEM,
                severity=ErrorSeverity.HIGH,
                context={"component": component},
                tags=["health_check", component],
            )

    async def _check_data_layer(self) -> ProbeResult:
        start = self._clock.monotonic()
        await self._data_layer.ping()
        response_time = (self._clock.monotonic() - start) * 1000
        return response_time, 0.0, f"Data layer responded in {round(response_time)}ms"

    async def _check_api(self) -> ProbeResult:
        start = self._clock.monotonic()
        ok, status_code = await self._api_probe.check()
        response_time = (self._clock.monotonic() - start) * 1000
        if ok:
            return response_time, 0.0, f"API responded with {status_code}"
        return response_time, 1.0, f"API returned status {status_code}"

    async def _check_frontend(self) -> ProbeResult:
        load_time = self._runtime.page_load_time() or 0.0
        memory_ratio = self._runtime.memory_usage_ratio()
        error_rate = 0.0
        message = f"Page load: {round(load_time)}ms"
        if memory_ratio is not None:
            message += f", memory: {round(memory_ratio * 100)}%"
            if memory_ratio > MEMORY_PRESSURE_RATIO:
                error_rate = MEMORY_PRESSURE_ERROR_RATE
        return load_time, error_rate, message

    async def _check_user_experience(self) -> ProbeResult:
        dom_ready = self._runtime.dom_content_loaded_time()
        fcp = self._runtime.first_contentful_paint()
        if dom_ready:
            response_time = dom_ready
        elif fcp:
            response_time = fcp
        else:
            response_time = UX_FALLBACK_MS
        error_rate = UX_SLOW_ERROR_RATE if response_time > UX_SLOW_THRESHOLD_MS else 0.0
        message = f"DOM ready: {round(dom_ready or 0)}ms, FCP: {round(fcp or 0)}ms"
        return response_time, error_rate, message
