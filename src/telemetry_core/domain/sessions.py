"""Real user monitoring models: sessions, page views and Web Vitals."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from telemetry_core.domain.models import InteractionType, VitalRating, isoformat


@dataclass
class CoreWebVitals:
    """Core Web Vitals snapshot. Times in ms, CLS is unitless."""

    FCP: float | None = None
    LCP: float | None = None
    FID: float | None = None
    CLS: float | None = None
    TTFB: float | None = None
    INP: float | None = None

    def copy(self) -> "CoreWebVitals":
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "FCP": self.FCP,
            "LCP": self.LCP,
            "FID": self.FID,
            "CLS": self.CLS,
            "TTFB": self.TTFB,
            "INP": self.INP,
        }


@dataclass(frozen=True)
class DeviceInfo:
    """Client device description reported at session start."""

    user_agent: str = ""
    viewport_width: int = 0
    viewport_height: int = 0
    screen_width: int = 0
    screen_height: int = 0
    device_pixel_ratio: float = 1.0
    platform: str = "unknown"
    language: str = ""
    timezone: str = ""
    cookies_enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_agent": self.user_agent,
            "viewport": {"width": self.viewport_width, "height": self.viewport_height},
            "screen": {"width": self.screen_width, "height": self.screen_height},
            "device_pixel_ratio": self.device_pixel_ratio,
            "platform": self.platform,
            "language": self.language,
            "timezone": self.timezone,
            "cookies_enabled": self.cookies_enabled,
        }


@dataclass
class PageView:
    """A page visit inside a session."""

    id: str
    url: str
    title: str
    timestamp: datetime
    load_time: float = 0.0
    time_on_page: float | None = None  # seconds, set when the next page view opens
    referrer: str | None = None
    exit_page: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "timestamp": self.timestamp.isoformat(),
            "load_time": self.load_time,
            "time_on_page": self.time_on_page,
            "referrer": self.referrer,
            "exit_page": self.exit_page,
        }


@dataclass(frozen=True)
class UserInteraction:
    """A typed user interaction event."""

    id: str
    type: InteractionType
    timestamp: datetime
    element: str | None = None
    response_time: float | None = None
    successful: bool = True
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "element": self.element,
            "timestamp": self.timestamp.isoformat(),
            "response_time": self.response_time,
            "successful": self.successful,
            "metadata": self.metadata,
        }


@dataclass
class UserSession:
    """A RUM session from start to end."""

    session_id: str
    start_time: datetime
    device_info: DeviceInfo
    vitals: CoreWebVitals
    user_id: str | None = None
    end_time: datetime | None = None
    duration: float | None = None  # seconds
    page_views: list[PageView] = field(default_factory=list)
    interactions: list[UserInteraction] = field(default_factory=list)
    bounced: bool = False
    converted: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "start_time": self.start_time.isoformat(),
            "end_time": isoformat(self.end_time),
            "duration": self.duration,
            "page_views": [pv.to_dict() for pv in self.page_views],
            "interactions": [i.to_dict() for i in self.interactions],
            "device_info": self.device_info.to_dict(),
            "vitals": self.vitals.to_dict(),
            "bounced": self.bounced,
            "converted": self.converted,
        }


@dataclass(frozen=True)
class VitalsScore:
    """Per-metric ratings and the composite UX score."""

    FCP: VitalRating
    LCP: VitalRating
    FID: VitalRating
    CLS: VitalRating
    overall: VitalRating
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "FCP": self.FCP.value,
            "LCP": self.LCP.value,
            "FID": self.FID.value,
            "CLS": self.CLS.value,
            "overall": self.overall.value,
            "score": self.score,
        }


@dataclass(frozen=True)
class TopPage:
    url: str
    views: int
    avg_load_time: float


@dataclass
class RUMStatistics:
    """Aggregates over completed sessions."""

    total_sessions: int = 0
    average_session_duration: float = 0.0
    bounce_rate: float = 0.0
    conversion_rate: float = 0.0
    average_page_load_time: float = 0.0
    average_time_on_page: float = 0.0
    unique_users: int = 0
    returning_users: int = 0
    top_pages: list[TopPage] = field(default_factory=list)
    device_breakdown: dict[str, int] = field(default_factory=dict)
    browser_breakdown: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_sessions": self.total_sessions,
            "average_session_duration": round(self.average_session_duration, 3),
            "bounce_rate": round(self.bounce_rate, 4),
            "conversion_rate": round(self.conversion_rate, 4),
            "average_page_load_time": round(self.average_page_load_time, 3),
            "average_time_on_page": round(self.average_time_on_page, 3),
            "unique_users": self.unique_users,
            "returning_users": self.returning_users,
            "top_pages": [
                {"url": p.url, "views": p.views, "avg_load_time": round(p.avg_load_time, 3)}
                for p in self.top_pages
            ],
            "device_breakdown": dict(self.device_breakdown),
            "browser_breakdown": dict(self.browser_breakdown),
        }


@dataclass(frozen=True)
class HourlySessionStats:
    hour: str
    session_count: int
    bounce_rate: float
    conversion_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour,
            "session_count": self.session_count,
            "bounce_rate": round(self.bounce_rate, 4),
            "conversion_rate": round(self.conversion_rate, 4),
        }
