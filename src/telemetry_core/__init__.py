"""In-process observability engine: performance, errors, RUM and system health."""

__version__ = "0.1.0"

from telemetry_core.config import HealthThresholds, PerformanceThresholds, Settings  # noqa: E402
from telemetry_core.engine import MonitoringEngine  # noqa: E402

__all__ = [
    "HealthThresholds",
    "MonitoringEngine",
    "PerformanceThresholds",
    "Settings",
    "__version__",
]
