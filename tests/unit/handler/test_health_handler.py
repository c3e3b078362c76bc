"""Tests for the liveness handler."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from telemetry_core import __version__
from telemetry_core.engine import MonitoringEngine
from telemetry_core.handler.health_handler import router


def _app() -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    return app


class TestHealthCheck:
    def test_reports_service(self):
        resp = TestClient(_app()).get("/health")

        assert resp.status_code == 200
        assert resp.json() == {
            "status": "healthy",
            "service": "telemetry-core",
            "version": __version__,
        }

    def test_reports_monitor_state_when_engine_attached(self, settings, clock, api_probe):
        app = _app()
        engine = MonitoringEngine(settings, clock=clock, api_probe=api_probe)
        engine.start_monitoring()
        app.state.engine = engine

        resp = TestClient(app).get("/health")

        assert resp.json()["monitors"] == {
            "performance": True,
            "errors": True,
            "rum": True,
            "health_checks": False,
        }
