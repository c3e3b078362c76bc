"""Tests for HealthScheduler."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from telemetry_core.config import Settings
from telemetry_core.scheduler.health_scheduler import JOB_ID, HealthScheduler


@pytest.fixture
def mock_aggregator():
    aggregator = MagicMock()
    aggregator.perform_health_check = AsyncMock(
        return_value=MagicMock(overall=MagicMock(value="healthy"))
    )
    return aggregator


class TestHealthScheduler:
    def test_start_disabled(self, mock_aggregator):
        scheduler = HealthScheduler(mock_aggregator, Settings(enable_health_monitoring=False))
        scheduler.start()

        assert not scheduler.running

    async def test_start_enabled_runs_first_check_immediately(self, mock_aggregator, settings):
        scheduler = HealthScheduler(mock_aggregator, settings)
        scheduler.start()

        job = scheduler._scheduler.get_job(JOB_ID)
        assert scheduler.running
        assert job is not None
        assert job.trigger.interval.total_seconds() == 30
        assert job.next_run_time is not None
        scheduler.stop()

    async def test_start_twice_keeps_single_job(self, mock_aggregator, settings):
        scheduler = HealthScheduler(mock_aggregator, settings)
        scheduler.start()
        scheduler.start()

        assert len(scheduler._scheduler.get_jobs()) == 1
        scheduler.stop()

    def test_stop_when_not_running(self, mock_aggregator, settings):
        scheduler = HealthScheduler(mock_aggregator, settings)
        # Should not raise
        scheduler.stop()

    async def test_run_scheduled_check_calls_aggregator(self, mock_aggregator, settings):
        scheduler = HealthScheduler(mock_aggregator, settings)

        await scheduler._run_scheduled_check()

        mock_aggregator.perform_health_check.assert_awaited_once()

    async def test_run_scheduled_check_handles_error(self, mock_aggregator, settings):
        mock_aggregator.perform_health_check.side_effect = Exception("probe crashed")
        scheduler = HealthScheduler(mock_aggregator, settings)

        # Should not raise
        await scheduler._run_scheduled_check()

        mock_aggregator.record_error.assert_called_once_with("health_check", "probe crashed")
