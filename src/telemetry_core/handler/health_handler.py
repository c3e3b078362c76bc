"""Liveness handler."""

from fastapi import APIRouter, Request

from telemetry_core import __version__

SERVICE_NAME = "telemetry-core"

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Process liveness plus which monitors are currently collecting."""
    body: dict = {"status": "healthy", "service": SERVICE_NAME, "version": __version__}

    engine = getattr(request.app.state, "engine", None)
    if engine is not None:
        body["monitors"] = {
            "performance": engine.performance.is_recording,
            "errors": engine.errors.is_tracking,
            "rum": engine.rum.is_monitoring,
            "health_checks": engine.scheduler.running,
        }
    return body
