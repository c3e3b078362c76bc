"""Port interfaces for external dependencies."""

from telemetry_core.port.clock_port import Clock
from telemetry_core.port.health_probe_port import ApiHealthProbe, DataLayerProbe
from telemetry_core.port.notifier_port import Notifier
from telemetry_core.port.runtime_port import RuntimeTimings
from telemetry_core.port.vitals_source_port import EntryCallback, PerformanceEntry, VitalsSource

__all__ = [
    "ApiHealthProbe",
    "Clock",
    "DataLayerProbe",
    "EntryCallback",
    "Notifier",
    "PerformanceEntry",
    "RuntimeTimings",
    "VitalsSource",
]
