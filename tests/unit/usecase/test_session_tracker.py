"""Tests for SessionTracker."""

from telemetry_core.domain.models import InteractionType
from telemetry_core.domain.sessions import DeviceInfo
from telemetry_core.usecase.session_tracker import SessionTracker
from telemetry_core.usecase.vitals_collector import VitalsCollector
from tests.fakes import START, FakeVitalsSource


class TestSessionLifecycle:
    def test_start_session_records_landing_page(self, session_tracker):
        session = session_tracker.start_session(
            "user-1", DeviceInfo(platform="Linux"), url="/dashboard", title="Dashboard"
        )

        assert session.user_id == "user-1"
        assert session.start_time == START
        assert [pv.url for pv in session.page_views] == ["/dashboard"]
        assert session.page_views[0].exit_page is True
        assert session_tracker.current_session is session

    def test_starting_new_session_ends_previous(self, session_tracker):
        first = session_tracker.start_session("a")
        second = session_tracker.start_session("b")

        assert session_tracker.sessions == [first]
        assert first.end_time is not None
        assert session_tracker.current_session is second

    def test_end_session_without_session(self, session_tracker):
        assert session_tracker.end_session() is None

    def test_end_session_duration_uses_monotonic_clock(self, session_tracker, clock):
        session_tracker.start_session()
        clock.advance(seconds=45)

        session = session_tracker.end_session()

        assert session.duration == 45
        assert session_tracker.current_session is None

    def test_history_is_bounded(self, clock, vitals_collector):
        tracker = SessionTracker(clock, vitals_collector, max_sessions=2)
        for user in ("a", "b", "c"):
            tracker.start_session(user)
            tracker.end_session()

        assert [s.user_id for s in tracker.sessions] == ["b", "c"]


class TestBounce:
    def test_single_page_short_session_bounces(self, session_tracker, clock):
        session_tracker.start_session()
        clock.advance(seconds=29)

        assert session_tracker.end_session().bounced is True

    def test_single_page_long_session_does_not_bounce(self, session_tracker, clock):
        session_tracker.start_session()
        clock.advance(seconds=31)

        assert session_tracker.end_session().bounced is False

    def test_two_pages_do_not_bounce(self, session_tracker, clock):
        session_tracker.start_session()
        clock.advance(seconds=2)
        session_tracker.record_page_view("/contacts", "Contacts")
        clock.advance(seconds=3)

        assert session_tracker.end_session().bounced is False


class TestRecording:
    def test_page_view_finalizes_previous(self, session_tracker, clock):
        session_tracker.start_session(url="/")
        clock.advance(seconds=12)

        page_view = session_tracker.record_page_view("/orgs", "Orgs", load_time=320, referrer="/")

        first, second = session_tracker.current_session.page_views
        assert first.time_on_page == 12
        assert first.exit_page is False
        assert second is page_view
        assert second.exit_page is True
        assert second.referrer == "/"

    def test_recording_without_session_is_noop(self, session_tracker):
        assert session_tracker.record_page_view("/x") is None
        assert session_tracker.record_interaction(InteractionType.CLICK) is None
        session_tracker.mark_conversion("signup")

        assert session_tracker.sessions == []

    def test_record_interaction(self, session_tracker):
        session_tracker.start_session()

        interaction = session_tracker.record_interaction(
            "click", element="button#save", response_time=40
        )

        assert interaction.type == InteractionType.CLICK
        assert session_tracker.current_session.interactions == [interaction]

    def test_mark_conversion(self, session_tracker):
        session_tracker.start_session()

        session_tracker.mark_conversion("opportunity_created", 1200.0)

        session = session_tracker.current_session
        assert session.converted is True
        [interaction] = session.interactions
        assert interaction.type == InteractionType.FORM_SUBMIT
        assert interaction.metadata["conversion"] is True
        assert interaction.metadata["value"] == 1200.0


class TestMonitoring:
    def test_start_monitoring_is_idempotent(self, clock):
        source = FakeVitalsSource()
        tracker = SessionTracker(clock, VitalsCollector(source))

        tracker.start_monitoring("u1")
        tracker.start_monitoring("u1")

        assert source.connect_count == 1
        assert tracker.is_monitoring is True
        assert tracker.current_session is not None

    def test_stop_monitoring_ends_session_and_disconnects(self, clock):
        source = FakeVitalsSource()
        tracker = SessionTracker(clock, VitalsCollector(source))
        tracker.start_monitoring("u1")

        tracker.stop_monitoring()
        tracker.stop_monitoring()

        assert source.callback is None
        assert tracker.current_session is None
        assert len(tracker.sessions) == 1

    def test_session_snapshots_vitals_at_end(self, session_tracker, vitals_collector):
        session_tracker.start_session()
        vitals_collector.handle_entry(
            {"entryType": "paint", "name": "first-contentful-paint", "startTime": 900}
        )

        session = session_tracker.end_session()

        assert session.vitals.FCP == 900


class TestDerivedViews:
    def test_statistics_cover_ended_sessions(self, session_tracker, clock):
        session_tracker.start_session("a")
        clock.advance(seconds=10)
        session_tracker.end_session()
        session_tracker.start_session("b")

        stats = session_tracker.statistics()

        assert stats.total_sessions == 1
        assert stats.bounce_rate == 1.0

    def test_recent_sessions(self, session_tracker, clock):
        session_tracker.start_session("old")
        session_tracker.end_session()
        clock.advance(hours=2)
        session_tracker.start_session("new")
        session_tracker.end_session()

        assert [s.user_id for s in session_tracker.recent_sessions()] == ["new"]

    def test_session_trend(self, session_tracker):
        session_tracker.start_session()
        session_tracker.end_session()

        trend = session_tracker.get_session_trend(hours=24)

        assert len(trend) == 24
        assert trend[-1].session_count == 1

    def test_export_filters(self, session_tracker, clock):
        session_tracker.start_session("a")
        session_tracker.mark_conversion("signup")
        clock.advance(seconds=60)
        session_tracker.end_session()
        session_tracker.start_session("b")
        session_tracker.end_session()

        exported = session_tracker.export_session_data(converted=True)

        assert [s["user_id"] for s in exported["sessions"]] == ["a"]
        assert exported["statistics"]["total_sessions"] == 2
        assert exported["vitals_score"]["overall"] == "needs-improvement"
        assert exported["filters"]["converted"] is True
