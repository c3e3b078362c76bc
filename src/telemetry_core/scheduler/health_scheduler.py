"""APScheduler-based periodic health checks."""

from datetime import datetime, timezone

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from telemetry_core.config import Settings
from telemetry_core.usecase.health_aggregator import HealthAggregator

logger = structlog.get_logger(component="health")

JOB_ID = "system_health_check"


class HealthScheduler:
    """Interval-based health check runner. The first check runs immediately."""

    def __init__(self, aggregator: HealthAggregator, settings: Settings) -> None:
        self._aggregator = aggregator
        self._settings = settings
        self._scheduler = AsyncIOScheduler()

    @property
    def running(self) -> bool:
        return self._scheduler.running

    async def _run_scheduled_check(self) -> None:
        try:
            status = await self._aggregator.perform_health_check()
            logger.debug("Scheduled health check completed", overall=status.overall.value)
        except Exception as e:
            logger.error("Scheduled health check failed", error=str(e))
            self._aggregator.record_error("health_check", str(e) or type(e).__name__)

    def start(self) -> None:
        """Schedule the check. Must be called with the event loop running."""
        if not self._settings.enable_health_monitoring:
            logger.info("Health monitoring disabled")
            return
        if self._scheduler.running:
            return

        trigger = IntervalTrigger(seconds=self._settings.health_check_interval_seconds)
        self._scheduler.add_job(
            self._run_scheduled_check,
            trigger,
            id=JOB_ID,
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Health scheduler started",
            interval_seconds=self._settings.health_check_interval_seconds,
        )

    def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.remove_all_jobs()
            self._scheduler.shutdown(wait=False)
            logger.info("Health scheduler stopped")
