"""FastAPI application: composition root for the monitoring dashboard."""

import asyncio
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from telemetry_core import __version__
from telemetry_core.config import HealthThresholds, PerformanceThresholds, Settings
from telemetry_core.engine import MonitoringEngine
from telemetry_core.gateway.notifier_gateway import WebhookNotifier
from telemetry_core.handler.dashboard_handler import router as dashboard_router
from telemetry_core.handler.health_handler import router as health_router
from telemetry_core.utils.logging import configure_logging

# Load settings eagerly: invalid env vars fail at import
settings = Settings()
performance_thresholds = PerformanceThresholds()
health_thresholds = HealthThresholds()

configure_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: build the engine and start health checks."""
    logger.info("Starting telemetry-core", host=settings.host, port=settings.port)

    # --- Driver layer ---
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.health_check_timeout_seconds),
        limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
    )
    webhook_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.webhook_timeout_seconds))
    notifier = WebhookNotifier(webhook_client)

    # --- Engine ---
    engine = MonitoringEngine(
        settings,
        notifier=notifier,
        http_client=http_client,
        performance_thresholds=performance_thresholds,
        health_thresholds=health_thresholds,
    )
    # Beacons posted to /vitals feed the collector for the whole process
    engine.vitals.connect()
    engine.errors.install_global_handlers(asyncio.get_running_loop())
    engine.start_health_monitoring()

    app.state.engine = engine
    logger.info("telemetry-core started successfully")

    yield

    # --- Shutdown ---
    logger.info("Shutting down telemetry-core")
    await engine.aclose()
    await notifier.drain()
    await http_client.aclose()
    await webhook_client.aclose()
    logger.info("telemetry-core stopped")


app = FastAPI(
    title="Telemetry Core",
    description="Performance, error, RUM and system health monitoring dashboard",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(dashboard_router)


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "telemetry_core.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    run()
