"""System health models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from telemetry_core.domain.models import HealthStatus

COMPONENT_NAMES = ("database", "api", "frontend", "user_experience")


@dataclass(frozen=True)
class ComponentHealth:
    """Health of a single probed component, derived purely from thresholds."""

    status: HealthStatus
    response_time: float
    error_rate: float
    last_checked: datetime
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "response_time": round(self.response_time, 3),
            "error_rate": self.error_rate,
            "message": self.message,
            "last_checked": self.last_checked.isoformat(),
        }


@dataclass(frozen=True)
class SystemHealthStatus:
    """Combined health of all components at one check."""

    overall: HealthStatus
    score: float
    components: dict[str, ComponentHealth]
    last_checked: datetime
    uptime: float  # seconds since the aggregator was created
    checks_performed: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall.value,
            "score": round(self.score, 2),
            "components": {name: c.to_dict() for name, c in self.components.items()},
            "last_checked": self.last_checked.isoformat(),
            "uptime": round(self.uptime, 3),
            "checks_performed": self.checks_performed,
        }


@dataclass(frozen=True)
class HealthErrorEntry:
    """A failure observed by a health probe or reported externally."""

    timestamp: datetime
    component: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "component": self.component,
            "error": self.error,
        }
