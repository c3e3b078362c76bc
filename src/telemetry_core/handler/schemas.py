"""Pydantic schemas for dashboard API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from telemetry_core.usecase.health_aggregator import HealthAggregator

MAX_ENTRIES_PER_BEACON = 500

# --- Request schemas ---


class PerformanceEntryModel(BaseModel):
    """One PerformanceObserver entry.

    Timing fields the collector and timeline read are typed so malformed
    beacons are rejected before anything is ingested. Unknown fields pass
    through unchanged.
    """

    model_config = ConfigDict(extra="allow")

    entryType: str | None = None
    name: str | None = None
    startTime: float = 0.0
    duration: float = 0.0
    value: float | None = None
    hadRecentInput: bool = False
    processingStart: float | None = None
    fetchStart: float | None = None
    requestStart: float | None = None
    responseStart: float | None = None
    domContentLoadedEventEnd: float | None = None
    loadEventEnd: float | None = None
    usedJSHeapSize: float | None = None
    totalJSHeapSize: float | None = None

    def to_entry(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class VitalsIngestRequest(BaseModel):
    """A batch of PerformanceObserver entries sent by a browser beacon."""

    entries: list[PerformanceEntryModel] = Field(
        default_factory=list, max_length=MAX_ENTRIES_PER_BEACON
    )


# --- Response schemas ---


class PerformanceExportResponse(BaseModel):
    metrics: list[dict[str, Any]]
    statistics: dict[str, dict[str, Any]]
    overall_statistics: dict[str, Any]
    exported_at: str
    filters: dict[str, Any]


class ErrorExportResponse(BaseModel):
    errors: list[dict[str, Any]]
    groups: list[dict[str, Any]]
    statistics: dict[str, Any]
    exported_at: str
    filters: dict[str, Any]


class SessionExportResponse(BaseModel):
    sessions: list[dict[str, Any]]
    statistics: dict[str, Any]
    vitals_score: dict[str, Any]
    exported_at: str
    filters: dict[str, Any]


class SystemHealthResponse(BaseModel):
    status: dict[str, Any]
    uptime_percentage: int
    trends: dict[str, str]
    recent_errors: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_aggregator(cls, health: HealthAggregator) -> "SystemHealthResponse":
        status = health.status
        return cls(
            status=status.to_dict(),
            uptime_percentage=health.uptime_percentage(),
            trends={name: health.get_component_trend(name) for name in status.components},
            recent_errors=[e.to_dict() for e in health.recent_errors()],
        )


class VitalsIngestResponse(BaseModel):
    accepted: int
    vitals: dict[str, float | None]
