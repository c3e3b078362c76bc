"""Exception hierarchy for the telemetry engine.

Probe and delivery failures are caught at the component boundary and turned
into health status or log events; they never escape to instrumented code.
"""


class TelemetryError(Exception):
    """Base class for telemetry engine errors."""


class ProbeError(TelemetryError):
    """A health probe failed.

    Raised by probe gateways and converted into a critical ComponentHealth.
    """

    def __init__(self, component: str, message: str) -> None:
        self.component = component
        super().__init__(f"[{component}] {message}")


class NotificationError(TelemetryError):
    """Alert delivery failed."""

    def __init__(self, channel: str, message: str) -> None:
        self.channel = channel
        super().__init__(f"[{channel}] {message}")


class ConfigurationError(TelemetryError):
    """Invalid engine configuration."""
