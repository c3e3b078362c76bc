"""Real user monitoring: session lifecycle, page views and interactions."""

from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

import structlog

from telemetry_core.domain.models import InteractionType
from telemetry_core.domain.sessions import (
    DeviceInfo,
    HourlySessionStats,
    PageView,
    RUMStatistics,
    UserInteraction,
    UserSession,
    VitalsScore,
)
from telemetry_core.evaluator.session_statistics import compute_rum_statistics, hourly_session_stats
from telemetry_core.port.clock_port import Clock
from telemetry_core.usecase.vitals_collector import VitalsCollector

logger = structlog.get_logger(component="rum")

DEFAULT_MAX_SESSIONS = 500
BOUNCE_MAX_SECONDS = 30


class SessionTracker:
    """Tracks at most one active session and a bounded history of ended ones.

    Recording methods are no-ops while no session is active.
    """

    def __init__(
        self,
        clock: Clock,
        vitals_collector: VitalsCollector,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        self._clock = clock
        self._vitals = vitals_collector
        self._max_sessions = max_sessions
        self._sessions: list[UserSession] = []
        self._current: UserSession | None = None
        self._current_started: float = 0.0
        self._monitoring = False

    @property
    def sessions(self) -> list[UserSession]:
        return list(self._sessions)

    @property
    def current_session(self) -> UserSession | None:
        return self._current

    @property
    def is_monitoring(self) -> bool:
        return self._monitoring

    @property
    def vitals_collector(self) -> VitalsCollector:
        return self._vitals

    # --- Lifecycle ---

    def start_monitoring(
        self, user_id: str | None = None, device_info: DeviceInfo | None = None
    ) -> None:
        if self._monitoring:
            return
        self._monitoring = True
        self._vitals.connect()
        self.start_session(user_id, device_info)
        logger.info("RUM monitoring started", user_id=user_id)

    def stop_monitoring(self) -> None:
        if not self._monitoring:
            return
        self._monitoring = False
        self.end_session()
        self._vitals.disconnect()
        logger.info("RUM monitoring stopped")

    def start_session(
        self,
        user_id: str | None = None,
        device_info: DeviceInfo | None = None,
        url: str = "/",
        title: str = "",
        load_time: float = 0.0,
    ) -> UserSession:
        """Open a new session, ending the active one first.

        The landing page is recorded as the first page view.
        """
        if self._current is not None:
            self.end_session()

        now = self._clock.now()
        self._current = UserSession(
            session_id=f"session_{uuid4().hex[:12]}",
            start_time=now,
            device_info=device_info or DeviceInfo(),
            vitals=self._vitals.vitals,
            user_id=user_id,
        )
        self._current_started = self._clock.monotonic()
        self.record_page_view(url, title, load_time)

        logger.debug("Session started", session_id=self._current.session_id, user_id=user_id)
        return self._current

    def end_session(self) -> UserSession | None:
        """Close the active session, evaluate bounce and move it to history."""
        session = self._current
        if session is None:
            return None

        session.end_time = self._clock.now()
        session.duration = self._clock.monotonic() - self._current_started
        session.vitals = self._vitals.vitals
        session.bounced = len(session.page_views) <= 1 and session.duration < BOUNCE_MAX_SECONDS

        self._sessions.append(session)
        overflow = len(self._sessions) - self._max_sessions
        if overflow > 0:
            del self._sessions[:overflow]
        self._current = None

        logger.debug(
            "Session ended",
            session_id=session.session_id,
            duration=round(session.duration, 3),
            bounced=session.bounced,
            converted=session.converted,
        )
        return session

    # --- Recording ---

    def record_page_view(
        self,
        url: str,
        title: str = "",
        load_time: float = 0.0,
        referrer: str | None = None,
    ) -> PageView | None:
        session = self._current
        if session is None:
            return None

        now = self._clock.now()
        if session.page_views:
            previous = session.page_views[-1]
            previous.time_on_page = (now - previous.timestamp).total_seconds()
            previous.exit_page = False

        page_view = PageView(
            id=f"pv_{uuid4().hex[:12]}",
            url=url,
            title=title,
            timestamp=now,
            load_time=load_time,
            referrer=referrer,
        )
        session.page_views.append(page_view)
        return page_view

    def record_interaction(
        self,
        type: InteractionType | str,
        element: str | None = None,
        response_time: float | None = None,
        successful: bool = True,
        metadata: dict[str, Any] | None = None,
    ) -> UserInteraction | None:
        session = self._current
        if session is None:
            return None

        interaction = UserInteraction(
            id=f"int_{uuid4().hex[:12]}",
            type=InteractionType(type),
            timestamp=self._clock.now(),
            element=element,
            response_time=response_time,
            successful=successful,
            metadata=metadata,
        )
        session.interactions.append(interaction)
        return interaction

    def mark_conversion(self, conversion_type: str, value: float | None = None) -> None:
        session = self._current
        if session is None:
            return

        session.converted = True
        self.record_interaction(
            InteractionType.FORM_SUBMIT,
            element=conversion_type,
            metadata={"conversion": True, "conversion_type": conversion_type, "value": value},
        )
        logger.info(
            "Conversion recorded",
            session_id=session.session_id,
            conversion_type=conversion_type,
            value=value,
        )

    # --- Derived views ---

    def statistics(self) -> RUMStatistics:
        return compute_rum_statistics(self._sessions)

    def vitals_score(self) -> VitalsScore:
        return self._vitals.score()

    def recent_sessions(self, window: timedelta = timedelta(hours=1)) -> list[UserSession]:
        cutoff = self._clock.now() - window
        return [s for s in self._sessions if s.start_time > cutoff]

    def get_session_trend(self, hours: int = 24) -> list[HourlySessionStats]:
        return hourly_session_stats(self._sessions, self._clock.now(), hours)

    def export_session_data(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        user_id: str | None = None,
        bounced: bool | None = None,
        converted: bool | None = None,
    ) -> dict[str, Any]:
        """JSON-serializable snapshot of matching sessions.

        Statistics and the vitals score describe the whole history, not just
        the filtered sessions.
        """
        selected = [
            s
            for s in self._sessions
            if (start is None or s.start_time >= start)
            and (end is None or s.start_time <= end)
            and (user_id is None or s.user_id == user_id)
            and (bounced is None or s.bounced == bounced)
            and (converted is None or s.converted == converted)
        ]

        return {
            "sessions": [s.to_dict() for s in selected],
            "statistics": self.statistics().to_dict(),
            "vitals_score": self.vitals_score().to_dict(),
            "exported_at": self._clock.now().isoformat(),
            "filters": {
                "start": start.isoformat() if start else None,
                "end": end.isoformat() if end else None,
                "user_id": user_id,
                "bounced": bounced,
                "converted": converted,
            },
        }

    def clear_sessions(self) -> None:
        self._sessions.clear()
