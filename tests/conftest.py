"""Shared test fixtures for telemetry-core."""

from unittest.mock import AsyncMock

import pytest

from telemetry_core.config import HealthThresholds, PerformanceThresholds, Settings
from telemetry_core.usecase.alert_evaluator import AlertEvaluator
from telemetry_core.usecase.error_tracker import ErrorTracker
from telemetry_core.usecase.performance_monitor import PerformanceMonitor
from telemetry_core.usecase.session_tracker import SessionTracker
from telemetry_core.usecase.vitals_collector import VitalsCollector
from tests.fakes import FakeClock, FakeVitalsSource, RecordingNotifier, StaticRuntime


@pytest.fixture
def settings() -> Settings:
    """Settings with test-safe defaults."""
    return Settings(
        api_base_url="http://api.test",
        health_check_interval_seconds=30,
        health_check_timeout_seconds=0.5,
        enable_health_monitoring=True,
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def perf_thresholds() -> PerformanceThresholds:
    return PerformanceThresholds()


@pytest.fixture
def health_thresholds() -> HealthThresholds:
    return HealthThresholds()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def vitals_source() -> FakeVitalsSource:
    return FakeVitalsSource()


@pytest.fixture
def runtime() -> StaticRuntime:
    return StaticRuntime()


@pytest.fixture
def monitor(clock, perf_thresholds) -> PerformanceMonitor:
    return PerformanceMonitor(clock, perf_thresholds)


@pytest.fixture
def alert_evaluator(clock, notifier) -> AlertEvaluator:
    return AlertEvaluator(clock, notifier)


@pytest.fixture
def tracker(clock, alert_evaluator) -> ErrorTracker:
    return ErrorTracker(clock, alert_evaluator)


@pytest.fixture
def vitals_collector(vitals_source) -> VitalsCollector:
    return VitalsCollector(vitals_source)


@pytest.fixture
def session_tracker(clock, vitals_collector) -> SessionTracker:
    return SessionTracker(clock, vitals_collector)


@pytest.fixture
def data_layer() -> AsyncMock:
    probe = AsyncMock()
    probe.ping.return_value = None
    return probe


@pytest.fixture
def api_probe() -> AsyncMock:
    probe = AsyncMock()
    probe.check.return_value = (True, 200)
    return probe
