"""Tests for SystemClock."""

from datetime import timezone

from telemetry_core.gateway.system_clock import SystemClock


class TestSystemClock:
    def test_now_is_utc(self):
        assert SystemClock().now().tzinfo == timezone.utc

    def test_monotonic_never_goes_back(self):
        clock = SystemClock()
        first = clock.monotonic()

        assert clock.monotonic() >= first
