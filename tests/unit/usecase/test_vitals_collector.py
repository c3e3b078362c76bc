"""Tests for VitalsCollector."""

import pytest


class TestHandleEntry:
    def test_first_contentful_paint(self, vitals_collector):
        vitals_collector.handle_entry(
            {"entryType": "paint", "name": "first-paint", "startTime": 300}
        )
        vitals_collector.handle_entry(
            {"entryType": "paint", "name": "first-contentful-paint", "startTime": 450}
        )

        assert vitals_collector.vitals.FCP == 450

    def test_lcp_uses_latest_entry(self, vitals_collector):
        vitals_collector.handle_entry({"entryType": "largest-contentful-paint", "startTime": 1200})
        vitals_collector.handle_entry({"entryType": "largest-contentful-paint", "startTime": 2100})

        assert vitals_collector.vitals.LCP == 2100

    def test_first_input_delay(self, vitals_collector):
        vitals_collector.handle_entry(
            {"entryType": "first-input", "startTime": 1000, "processingStart": 1040}
        )

        assert vitals_collector.vitals.FID == 40

    def test_cls_sums_shifts_without_recent_input(self, vitals_collector):
        for value, had_input in ((0.02, False), (0.5, True), (0.03, False)):
            vitals_collector.handle_entry(
                {"entryType": "layout-shift", "value": value, "hadRecentInput": had_input}
            )

        assert vitals_collector.vitals.CLS == pytest.approx(0.05)

    def test_ttfb_from_navigation(self, vitals_collector):
        vitals_collector.handle_entry(
            {"entryType": "navigation", "requestStart": 20, "responseStart": 180}
        )

        assert vitals_collector.vitals.TTFB == 160

    def test_inp_is_max_event_duration(self, vitals_collector):
        for duration in (80, 240, 120):
            vitals_collector.handle_entry({"entryType": "event", "duration": duration})

        assert vitals_collector.vitals.INP == 240

    def test_unknown_entries_are_ignored(self, vitals_collector):
        vitals_collector.handle_entry({"entryType": "resource", "startTime": 5})

        assert vitals_collector.vitals.to_dict() == {
            "FCP": None,
            "LCP": None,
            "FID": None,
            "CLS": None,
            "TTFB": None,
            "INP": None,
        }


class TestSubscription:
    def test_connect_routes_source_entries(self, vitals_collector, vitals_source):
        vitals_collector.connect()
        vitals_source.emit({"entryType": "largest-contentful-paint", "startTime": 1800})

        assert vitals_collector.is_connected is True
        assert vitals_collector.vitals.LCP == 1800

    def test_disconnect(self, vitals_collector, vitals_source):
        vitals_collector.connect()
        vitals_collector.disconnect()

        assert vitals_source.callback is None
        assert vitals_collector.is_connected is False

    def test_vitals_property_is_a_copy(self, vitals_collector):
        snapshot = vitals_collector.vitals
        snapshot.FCP = 1.0

        assert vitals_collector.vitals.FCP is None

    def test_score_and_reset(self, vitals_collector):
        for entry in (
            {"entryType": "paint", "name": "first-contentful-paint", "startTime": 900},
            {"entryType": "largest-contentful-paint", "startTime": 1500},
            {"entryType": "first-input", "startTime": 10, "processingStart": 30},
            {"entryType": "layout-shift", "value": 0.01, "hadRecentInput": False},
        ):
            vitals_collector.handle_entry(entry)

        assert vitals_collector.score().overall.value == "good"

        vitals_collector.reset()
        assert vitals_collector.vitals.LCP is None
