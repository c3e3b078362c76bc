"""Aggregates over completed RUM sessions."""

from collections import Counter
from collections.abc import Sequence
from datetime import datetime

from telemetry_core.domain.sessions import HourlySessionStats, RUMStatistics, TopPage, UserSession
from telemetry_core.evaluator.statistics import hour_label, hour_windows

TOP_PAGES = 10

# Order matters: Edge and Chrome user agents also mention Chrome and Safari.
_BROWSER_MARKERS = (
    ("Edg", "Edge"),
    ("Firefox", "Firefox"),
    ("Chrome", "Chrome"),
    ("Safari", "Safari"),
)


def detect_browser(user_agent: str) -> str:
    for marker, name in _BROWSER_MARKERS:
        if marker in user_agent:
            return name
    return "Other"


def compute_rum_statistics(sessions: Sequence[UserSession]) -> RUMStatistics:
    """Session, page and device aggregates. All rates are 0 with no sessions."""
    if not sessions:
        return RUMStatistics()

    total = len(sessions)
    completed = [s for s in sessions if s.duration is not None]
    page_views = [pv for s in sessions for pv in s.page_views]
    timed_views = [pv for pv in page_views if pv.time_on_page]

    sessions_per_user = Counter(s.user_id for s in sessions if s.user_id is not None)
    unique_users = {s.user_id or s.session_id for s in sessions}

    views: Counter[str] = Counter()
    load_totals: dict[str, float] = {}
    for pv in page_views:
        views[pv.url] += 1
        load_totals[pv.url] = load_totals.get(pv.url, 0.0) + pv.load_time

    # Counter.most_common keeps first-seen order for ties
    top_pages = [
        TopPage(url=url, views=count, avg_load_time=load_totals[url] / count)
        for url, count in views.most_common(TOP_PAGES)
    ]

    return RUMStatistics(
        total_sessions=total,
        average_session_duration=(
            sum(s.duration for s in completed) / len(completed) if completed else 0.0
        ),
        bounce_rate=sum(1 for s in sessions if s.bounced) / total,
        conversion_rate=sum(1 for s in sessions if s.converted) / total,
        average_page_load_time=(
            sum(pv.load_time for pv in page_views) / len(page_views) if page_views else 0.0
        ),
        average_time_on_page=(
            sum(pv.time_on_page for pv in timed_views) / len(timed_views) if timed_views else 0.0
        ),
        unique_users=len(unique_users),
        returning_users=sum(1 for count in sessions_per_user.values() if count > 1),
        top_pages=top_pages,
        device_breakdown=dict(Counter(s.device_info.platform for s in sessions)),
        browser_breakdown=dict(Counter(detect_browser(s.device_info.user_agent) for s in sessions)),
    )


def hourly_session_stats(
    sessions: Sequence[UserSession], now: datetime, hours: int = 24
) -> list[HourlySessionStats]:
    """Sessions started per hour with bounce and conversion rates, oldest first."""
    buckets: list[HourlySessionStats] = []
    for start, end in hour_windows(now, hours):
        in_hour = [s for s in sessions if start < s.start_time <= end]
        count = len(in_hour)
        buckets.append(
            HourlySessionStats(
                hour=hour_label(start),
                session_count=count,
                bounce_rate=sum(1 for s in in_hour if s.bounced) / count if count else 0.0,
                conversion_rate=sum(1 for s in in_hour if s.converted) / count if count else 0.0,
            )
        )
    return buckets
